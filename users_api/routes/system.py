"""Root and health endpoints"""
import asyncio
from datetime import datetime, timezone
from logging import getLogger

from fastapi import APIRouter, Depends

from users_api.config import Settings
from users_api.database import UserStore
from users_api.dependencies import get_settings, get_user_store
from users_api.responses import write_json

logger = getLogger(__name__)

system_router = APIRouter()


async def probe_store(store: UserStore, timeout: float) -> bool:
    """Ping the store in an executor thread, bounded by timeout seconds.

    On timeout the ping thread is abandoned rather than awaited.
    """
    loop = asyncio.get_running_loop()
    try:
        await asyncio.wait_for(loop.run_in_executor(None, store.ping), timeout=timeout)
        return True
    except asyncio.TimeoutError:
        logger.warning("Store ping timed out after %.1fs", timeout)
    except Exception as e:
        logger.warning("Store ping failed: %s", e)
    return False


def unhealthy_response():
    return write_json({"status": "unhealthy", "database": "down"}, 503)


@system_router.get("/")
def root():
    return write_json({
        "message": "Welcome to the users API",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })

@system_router.get("/health")
async def health_check(
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
):
    """Check if application is running"""
    if not await probe_store(store, settings.HEALTH_CHECK_TIMEOUT):
        return unhealthy_response()
    return write_json({"status": "healthy", "service": "users-service"})

"""v2 endpoints: the new service reading and writing the shared users table"""
from logging import getLogger

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from users_api.config import Settings
from users_api.database import UserStore
from users_api.decoding import decode_create_user, parse_user_id
from users_api.dependencies import get_settings, get_user_store
from users_api.errors import StoreError
from users_api.models import UserCreatedResponse, UserListResponse
from users_api.responses import write_json
from users_api.routes.system import probe_store, unhealthy_response

logger = getLogger(__name__)

SERVICE_NAME = "v2-service"
SERVED_BY = {"X-Served-By": SERVICE_NAME}

v2_router = APIRouter()


@v2_router.get("/health")
async def health_check(
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
):
    """First endpoint the edge router sends to the new service"""
    if not await probe_store(store, settings.HEALTH_CHECK_TIMEOUT):
        return unhealthy_response()
    return write_json({"status": "healthy", "service": SERVICE_NAME, "database": "up"})

@v2_router.get("/api/v2/users")
def list_users(
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
):
    """Newest users first, capped at USERS_LIST_LIMIT"""
    try:
        users = store.list_users()
    except StoreError as e:
        raise StoreError("Database error") from e

    # Debug headers so the migration can be traced at the edge
    headers = {**SERVED_BY, "X-Migration-Phase": str(settings.MIGRATION_PHASE)}
    body = UserListResponse(
        data=users,
        count=len(users),
        meta={"version": "v2", "engine": "python"},
    )
    return write_json(body, headers=headers)

@v2_router.get("/api/v2/users/{user_id}")
def get_user(user_id: str, store: UserStore = Depends(get_user_store)):
    return write_json(store.get_user(parse_user_id(user_id)), headers=SERVED_BY)

@v2_router.post("/api/v2/users")
async def create_user(request: Request, store: UserStore = Depends(get_user_store)):
    """Insert into the shared table, the legacy service sees the row immediately"""
    user_request = decode_create_user(await request.body())
    try:
        user = await run_in_threadpool(store.create_user, user_request)
    except StoreError as e:
        raise StoreError("Failed to create user") from e

    body = UserCreatedResponse(id=user.id, message="User created by v2 service")
    return write_json(body, 201, headers=SERVED_BY)

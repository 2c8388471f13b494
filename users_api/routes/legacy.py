"""Legacy v1 endpoints still served by the old service during the migration"""
from logging import getLogger

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from users_api.config import Settings
from users_api.database import UserStore
from users_api.decoding import decode_create_user
from users_api.dependencies import get_settings, get_user_store
from users_api.errors import StoreError
from users_api.models import UserCreatedResponse, UserListResponse
from users_api.responses import write_json
from users_api.routes.system import probe_store, unhealthy_response

logger = getLogger(__name__)

SERVICE_NAME = "legacy-service"
CATCH_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]

legacy_router = APIRouter()


@legacy_router.get("/api/v1/health")
async def health_check(
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
):
    if not await probe_store(store, settings.HEALTH_CHECK_TIMEOUT):
        return unhealthy_response()
    return write_json({"status": "healthy", "service": SERVICE_NAME, "version": "v1"})

@legacy_router.get("/api/v1/users")
def list_users(store: UserStore = Depends(get_user_store)):
    """All users in id order, no cap"""
    try:
        users = store.list_users_by_id()
    except StoreError as e:
        raise StoreError("Database error") from e
    return write_json(UserListResponse(data=users, meta={"version": "v1", "engine": "legacy"}))

@legacy_router.post("/api/v1/users")
async def create_user(request: Request, store: UserStore = Depends(get_user_store)):
    user_request = decode_create_user(await request.body())
    try:
        user = await run_in_threadpool(store.create_user, user_request)
    except StoreError as e:
        raise StoreError("Failed to create user") from e
    return write_json(UserCreatedResponse(id=user.id, message="User created by legacy service"), 201)

# Routes not yet migrated
@legacy_router.api_route("/legacy/{path:path}", methods=CATCH_ALL_METHODS)
def legacy_endpoint(request: Request):
    return write_json({"message": "Legacy endpoint - to be migrated", "path": request.url.path})

# Low priority for migration
@legacy_router.api_route("/admin/{path:path}", methods=CATCH_ALL_METHODS)
def admin_endpoint(request: Request):
    return write_json({"message": "Admin endpoint - legacy only", "path": request.url.path})

"""In-memory users endpoints of the demo service"""
from logging import getLogger

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from users_api.database import UserStore
from users_api.decoding import decode_create_user, parse_user_id
from users_api.dependencies import get_user_store
from users_api.responses import write_json

logger = getLogger(__name__)

users_router = APIRouter(prefix="/users")


@users_router.get("")
def list_users(store: UserStore = Depends(get_user_store)):
    """All users in insertion order"""
    return write_json(store.list_users())

@users_router.get("/{user_id}")
def get_user(user_id: str, store: UserStore = Depends(get_user_store)):
    return write_json(store.get_user(parse_user_id(user_id)))

@users_router.post("")
async def create_user(request: Request, store: UserStore = Depends(get_user_store)):
    """Create a user from {name, email} and echo the stored record"""
    user_request = decode_create_user(await request.body())
    user = await run_in_threadpool(store.create_user, user_request)
    return write_json(user, 201)

"""Users demo service: the request pipeline over an in-memory store"""
from logging import getLogger
from typing import Optional

import uvicorn
from fastapi import FastAPI

from users_api.application import build_app
from users_api.config import Settings
from users_api.core.logging import setup_logging
from users_api.database import InMemoryUserStore, UserStore
from users_api.routes.system import system_router
from users_api.routes.users import users_router

logger = getLogger(__name__)


def create_users_app(settings: Optional[Settings] = None,
                     user_store: Optional[UserStore] = None) -> FastAPI:
    return build_app(
        title="Users Service",
        description="Users API backed by an in-memory store",
        service_name="users-service",
        routers=[system_router, users_router],
        settings=settings,
        user_store=user_store,
        store_factory=lambda _settings: InMemoryUserStore(),
    )


app = create_users_app()


def run() -> None:
    settings = Settings()
    setup_logging(level=settings.LOG_LEVEL, fmt=settings.LOG_FORMAT)
    logger.info("Users service starting on port %d", settings.PORT)
    uvicorn.run(create_users_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()

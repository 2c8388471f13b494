"""Legacy v1 service, kept running until every route is migrated to v2"""
from logging import getLogger
from typing import Optional

import uvicorn
from fastapi import FastAPI

from users_api.application import build_app, duckdb_store_factory
from users_api.config import Settings
from users_api.core.logging import setup_logging
from users_api.database import UserStore
from users_api.routes.legacy import SERVICE_NAME, legacy_router

logger = getLogger(__name__)


def create_legacy_app(settings: Optional[Settings] = None,
                      user_store: Optional[UserStore] = None) -> FastAPI:
    return build_app(
        title="Users Service (legacy)",
        description="Legacy v1 users API",
        service_name=SERVICE_NAME,
        routers=[legacy_router],
        settings=settings,
        user_store=user_store,
        store_factory=duckdb_store_factory,
        response_headers={"X-Served-By": SERVICE_NAME},
    )


app = create_legacy_app()


def run() -> None:
    settings = Settings()
    setup_logging(level=settings.LOG_LEVEL, fmt=settings.LOG_FORMAT)
    logger.info("Legacy service starting on port %d", settings.PORT)
    uvicorn.run(create_legacy_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()

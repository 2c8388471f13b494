"""v2 service: new implementation of the users API on the shared table.

The edge router sends /health and /api/v2/* here, /api/v1/* stays on the
legacy service.
"""
from logging import getLogger
from typing import Optional

import uvicorn
from fastapi import FastAPI

from users_api.application import build_app, duckdb_store_factory
from users_api.config import Settings
from users_api.core.logging import setup_logging
from users_api.database import UserStore
from users_api.routes.v2_users import v2_router

logger = getLogger(__name__)


def create_v2_app(settings: Optional[Settings] = None,
                  user_store: Optional[UserStore] = None) -> FastAPI:
    return build_app(
        title="Users Service v2",
        description="New users API sharing the users table with the legacy service",
        service_name="v2-service",
        routers=[v2_router],
        settings=settings,
        user_store=user_store,
        store_factory=duckdb_store_factory,
    )


app = create_v2_app()


def run() -> None:
    settings = Settings()
    setup_logging(level=settings.LOG_LEVEL, fmt=settings.LOG_FORMAT)
    logger.info("v2 service starting on port %d", settings.PORT)
    logger.info("Routes: /health, /api/v2/*. Legacy routes (/api/v1/*) stay on the legacy service")
    uvicorn.run(create_v2_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()

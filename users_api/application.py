"""Shared FastAPI application factory for the users services"""
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from logging import getLogger
from typing import Dict, Iterable, Optional, TypedDict

from fastapi import APIRouter, FastAPI

from users_api import __version__
from users_api.config import Settings
from users_api.database import DuckDBConnectionPool, DuckDBUserStore, UserStore
from users_api.errors import register_exception_handlers
from users_api.middleware import default_pipeline

logger = getLogger(__name__)

StoreFactory = Callable[[Settings], UserStore]


# Define typed application state
class State(TypedDict):
    """Application state with type definitions"""
    user_store: UserStore
    settings: Settings


def duckdb_store_factory(settings: Settings) -> UserStore:
    """Open the shared users table through a bounded connection pool"""
    pool = DuckDBConnectionPool(
        db_path=settings.DATABASE_URL,
        max_open=settings.DB_MAX_OPEN_CONNS,
        max_idle=settings.DB_MAX_IDLE_CONNS,
        max_lifetime=settings.DB_CONN_MAX_LIFETIME,
        acquire_timeout=settings.DB_ACQUIRE_TIMEOUT,
    )
    try:
        return DuckDBUserStore(pool, list_limit=settings.USERS_LIST_LIMIT)
    except Exception:
        pool.close()
        raise


def build_app(
    *,
    title: str,
    description: str,
    service_name: str,
    routers: Iterable[APIRouter],
    settings: Optional[Settings] = None,
    user_store: Optional[UserStore] = None,
    store_factory: StoreFactory = duckdb_store_factory,
    response_headers: Optional[Dict[str, str]] = None,
) -> FastAPI:
    """Assemble routers, error handlers and the middleware pipeline.

    An injected user_store is used as is and left open on shutdown; otherwise
    store_factory builds one at startup and it is closed on shutdown. Startup
    fails when the store cannot be reached.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[State]:
        """FastAPI lifespan manager - startup and shutdown events"""
        logger.info("Starting %s...", service_name)
        owns_store = user_store is None
        store = user_store
        try:
            if store is None:
                store = store_factory(settings)
            store.ping()
        except Exception as e:
            logger.critical("%s cannot reach its store: %s", service_name, e)
            if owns_store and store is not None:
                store.close()
            raise

        yield {"user_store": store, "settings": settings}

        logger.info("Shutting down %s...", service_name)
        if owns_store:
            store.close()

    app = FastAPI(
        title=title,
        description=description,
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    register_exception_handlers(app)
    default_pipeline(response_headers).install(app)

    for router in routers:
        app.include_router(router)

    return app

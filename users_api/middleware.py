"""Middleware pipeline for the users services.

Steps are kept as an ordered list and installed onto the FastAPI app so the
first step added is the outermost. The default order is

    RequestLoggingMiddleware -> CORSMiddleware -> ErrorEnvelopeMiddleware -> router

so every request is logged once (preflights included) and CORS headers are
present on every response, errors included.
"""
import time
from logging import getLogger
from typing import Any, Dict, List, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from users_api.responses import write_json

logger = getLogger(__name__)
access_logger = getLogger("users_api.access")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and elapsed time. Never alters the response"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        access_logger.info("%s %s -> %d in %.2fms",
                           request.method, request.url.path, response.status_code, elapsed_ms)
        return response


class CORSMiddleware(BaseHTTPMiddleware):
    """Permissive CORS headers on every response.

    OPTIONS is answered here with an empty 200, the inner app is not called.
    Unlike starlette's CORSMiddleware this does not require an Origin header.
    """

    def __init__(self, app, headers: Dict[str, str] = None):
        super().__init__(app)
        self.headers = dict(headers or CORS_HEADERS)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=self.headers)

        response = await call_next(request)
        response.headers.update(self.headers)
        return response


class ResponseHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp fixed headers (e.g. X-Served-By) on every response"""

    def __init__(self, app, headers: Dict[str, str]):
        super().__init__(app)
        self.headers = dict(headers)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        return response


class ErrorEnvelopeMiddleware(BaseHTTPMiddleware):
    """Last line of defence: an unexpected exception becomes a JSON 500"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return write_json({"error": "Internal server error"}, 500)


class MiddlewarePipeline:
    """Ordered list of middleware steps, first added = outermost"""

    def __init__(self):
        self.steps: List[Tuple[Type, Dict[str, Any]]] = []

    def add(self, middleware_class: Type, **options) -> "MiddlewarePipeline":
        self.steps.append((middleware_class, options))
        return self

    def install(self, app: FastAPI) -> None:
        """Register the steps on the app.

        Starlette wraps the most recently added middleware outermost, so the
        list is registered in reverse.
        """
        for middleware_class, options in reversed(self.steps):
            app.add_middleware(middleware_class, **options)
        logger.debug("Installed middleware: %s",
                     " -> ".join(cls.__name__ for cls, _ in self.steps))


def default_pipeline(response_headers: Dict[str, str] = None) -> MiddlewarePipeline:
    pipeline = MiddlewarePipeline().add(RequestLoggingMiddleware)
    if response_headers:
        pipeline.add(ResponseHeadersMiddleware, headers=response_headers)
    return pipeline.add(CORSMiddleware).add(ErrorEnvelopeMiddleware)

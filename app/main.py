"""FastAPI app factory: request logging middleware, health endpoint, catalog API."""
from __future__ import annotations

import os
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from app import __version__
from app.api import router as api_router
from app.logging_conf import get_logger, setup_logging

# Configure logging before anything else.
setup_logging()
logger = get_logger("app")


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("startup", extra={"event": "startup"})
    yield
    logger.info("shutdown", extra={"event": "shutdown"})


def _route_name(request: Request) -> str | None:
    """Name of the endpoint the router matched, once routing has run."""
    endpoint = request.scope.get("endpoint")
    return getattr(endpoint, "__name__", None)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Resource Links Catalog",
        version=os.getenv("APP_VERSION", __version__),
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """Log each request as a start/end pair tied together by X-Request-ID.

        The end event names the matched route (e.g. `list_items`), so link
        traffic can be grouped per controller endpoint.
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id
        fields = {"method": request.method, "path": request.url.path, "request_id": request_id}

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={"event": "request_start", "query": request.url.query, **fields},
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={"event": "request_error", "route": _route_name(request), **fields},
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "route": _route_name(request),
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                **fields,
            },
        )
        return response

    @app.get("/health", summary="Liveness/readiness check")
    async def health() -> JSONResponse:
        return JSONResponse(content={"ok": True})

    app.include_router(api_router)

    return app


# ASGI entrypoint for uvicorn: `uvicorn app.main:app --port 8000`
app = create_app()

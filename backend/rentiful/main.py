# backend/rentiful/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .db import init_db
from .logging_config import configure_logging
from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware
from .routers.applications import router as applications_router
from .routers.auth import router as auth_router
from .routers.health import router as health_router
from .routers.leases import router as leases_router
from .routers.managers import router as managers_router
from .routers.properties import router as properties_router
from .routers.tenants import router as tenants_router

log = logging.getLogger("rentiful.app")


def _cors_origins() -> list[str]:
    val = getattr(settings, "cors_allow_origins", ["*"])
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # prod schema is owned by alembic
    if not settings.is_prod:
        init_db()
    yield


async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    body = {"message": "Internal server error"}
    if (settings.app_env or "").strip().lower() in ("local", "dev"):
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Rentiful API", version="0.1.0", lifespan=lifespan)

    # Added in reverse: RequestID ends up outermost so the logging line sees the id.
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(Exception, unhandled_exception)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(properties_router)
    app.include_router(managers_router)
    app.include_router(tenants_router)
    app.include_router(leases_router)
    app.include_router(applications_router)

    return app


app = create_app()

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routers import access_requests, admin_users, auth, health, software
from .models.user import Base
from .db import build_context
from .core.config import Settings
from .core.errors import AppError, Unauthorized
from .core.seed import seed_admin

import access_api.models.software  # noqa: F401
import access_api.models.request  # noqa: F401
import access_api.models.event  # noqa: F401

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(level=settings.LOG_LEVEL.upper())
        ctx = build_context(settings)
        app.state.context = ctx

        if settings.AUTO_DB_BOOTSTRAP:
            # Create tables in dev if missing.
            Base.metadata.create_all(bind=ctx.engine)
        if settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD:
            with ctx.session_factory() as session:
                seed_admin(session, settings)

        logger.info("access api started")
        try:
            yield
        finally:
            ctx.dispose()
            logger.info("access api stopped")

    app = FastAPI(title="User Access Management API", lifespan=lifespan)

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(health.router)
    for module in (auth, software, access_requests, admin_users):
        app.include_router(module.router, prefix=settings.API_PREFIX)

    # CORS: allow local dev origins by default.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()

"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated

import structlog
from fastapi import Depends, FastAPI

from bearer_auth.api.token_router import router as token_router
from bearer_auth.core.config import Settings
from bearer_auth.core.config import settings as default_settings
from bearer_auth.core.exceptions import AppException, app_exception_handler
from bearer_auth.core.middleware import AuthMiddleware
from bearer_auth.core.token_config import init_from_settings
from bearer_auth.core.token_store import close_token_store, init_token_store
from bearer_auth.dependencies import get_current_identity
from bearer_auth.schemas.response_schema import ApiResponse, success_response

logger = structlog.get_logger()

PUBLIC_PATHS: tuple[str, ...] = (
    "/",
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/api/auth/*",
)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application; the token configuration is set up on startup."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "Starting application",
            app_name=settings.app.name,
            environment=settings.app.env,
            refresh_token_store=settings.auth.refresh_token_store,
        )
        init_from_settings(settings, extra_skip_paths=PUBLIC_PATHS)
        await init_token_store(settings.auth, settings.redis)
        yield
        await close_token_store()
        logger.info("Shutting down application")

    app = FastAPI(
        title=settings.app.name,
        description="Bearer token issuance, verification and rotation",
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.app.debug,
    )

    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_middleware(AuthMiddleware)

    @app.get("/", response_model=ApiResponse[dict])
    async def root() -> dict:
        """Root endpoint."""
        return success_response(
            {"app": settings.app.name, "version": "0.1.0", "docs": "/docs"}
        )

    @app.get("/health", response_model=ApiResponse[dict])
    async def health_check() -> dict:
        """Health check endpoint."""
        return success_response({"status": "healthy"})

    @app.get("/api/me", response_model=ApiResponse[dict])
    async def me(identity: Annotated[str, Depends(get_current_identity)]) -> dict:
        """Echo the authenticated identity."""
        return success_response({"identity": identity})

    app.include_router(token_router)
    return app


app = create_app()

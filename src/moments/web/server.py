from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from moments.app import App
from moments.config import Config
from moments.core.modules.upload.storage import UPLOADS_URL_PREFIX
from moments.errors import ConfigurationError, UserError
from moments.web.error_handlers import (
    configuration_error_handler,
    general_exception_handler,
    http_exception_handler,
    request_validation_error_handler,
    user_error_handler,
)
from moments.web.middleware import AuthGateMiddleware
from moments.web.openapi import set_custom_openapi
from moments.web.routers import auth_router, health_router, moments_router, upload_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        # Store app instance and config in app state
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Moments API",
        lifespan=lifespan,
        openapi_tags=[],
    )

    app.add_middleware(AuthGateMiddleware, app_instance=app_instance)

    # Added last so it wraps the gate and answers preflight requests itself
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Liveness probe, independent of the store
    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api")
    app.include_router(moments_router, prefix="/api")
    app.include_router(upload_router, prefix="/api")
    app.include_router(health_router, prefix="/api")

    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=config.uploads_path, check_dir=False), name="uploads")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app

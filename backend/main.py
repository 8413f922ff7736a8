from fastapi import FastAPI

from route_errors.core.config import settings
from route_errors.api.routes import api_router, internal_router
from route_errors.core.handlers import install_error_handlers


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME)

    # Routers
    app.include_router(api_router, prefix=settings.API_V1_STR)
    if settings.INTERNAL_ROUTES_ENABLED:
        app.include_router(internal_router, prefix=settings.API_V1_STR)

    # Global exception handlers
    install_error_handlers(app)

    return app


app = create_app()

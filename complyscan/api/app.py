from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from complyscan.api.errors import register_exception_handlers
from complyscan.api.routers import account, analyze, health, privacy, reports
from complyscan.api.services import Services, build_services, shutdown_services
from complyscan.config.settings import Settings


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Build the HTTP application.

    When ``services`` is given (tests), it is used as-is and never closed by
    the app. Otherwise services are built from ``settings`` on startup.
    """
    settings = settings or (services.settings if services else Settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services is not None:
            app.state.services = services
            yield
            return
        app.state.services = build_services(settings)
        try:
            yield
        finally:
            shutdown_services(app.state.services)

    app = FastAPI(title="complyscan", version="0.1.0", lifespan=lifespan)
    if services is not None:
        app.state.services = services

    origins = [origin.strip() for origin in settings.cors_allowed_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(analyze.router)
    app.include_router(reports.router)
    app.include_router(account.router)
    app.include_router(privacy.router)
    return app

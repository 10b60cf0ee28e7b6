"""Entry point for the Scoopify business intelligence API."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from .api.routers import api_router, health_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .deps import SettingsDependency
from .errors import register_exception_handlers
from .schemas.system import MetadataResponse


def _normalise_prefix(raw_prefix: str) -> str:
    prefix = raw_prefix.strip()
    if prefix and not prefix.startswith("/"):
        prefix = f"/{prefix}"
    prefix = prefix.rstrip("/")
    return "" if prefix == "/" else prefix


def create_app() -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    settings = get_settings()
    configure_logging(settings)

    router_prefix = _normalise_prefix(settings.api_prefix)
    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Weekly business intelligence reports for Scoopify Club.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=f"{router_prefix}/openapi.json",
    )
    application.state.settings = settings
    application.add_middleware(CorrelationIdMiddleware)

    application.include_router(api_router, prefix=router_prefix)
    application.include_router(health_router)

    @application.get(
        f"{router_prefix}/metadata",
        response_model=MetadataResponse,
        tags=["system"],
        summary="Service metadata",
    )
    async def read_api_metadata(settings: SettingsDependency) -> MetadataResponse:
        return MetadataResponse(
            name=settings.project_name,
            environment=settings.environment,
            version=settings.version,
            api_prefix=settings.api_prefix,
        )

    register_exception_handlers(application)
    return application


app = create_app()


def run() -> None:
    """Convenience entry point for ``scoopify-api``."""

    settings: Settings = get_settings()
    uvicorn.run(
        "scoopify.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )

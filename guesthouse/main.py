from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from guesthouse.api.v1.router import router as api_v1_router
from guesthouse.config.settings import Settings, get_settings
from guesthouse.core.logging import configure_logging, get_logger
from guesthouse.core.middleware import register_exception_handlers, register_middlewares
from guesthouse.db.init_db import init_db

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, create_tables: Optional[bool] = None) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Registers CORS, core middleware and exception handlers.
    - Includes the versioned API router under API_V1_STR.
    - Creates missing tables on startup outside production
      (``create_tables`` overrides that).
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=settings.CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok", "service": settings.APP_NAME, "version": settings.API_VERSION}

    if create_tables is None:
        create_tables = not settings.is_production()

    @app.on_event("startup")
    def on_startup() -> None:
        if create_tables:
            init_db()
        logger.info("Application started", extra={"environment": settings.ENVIRONMENT})

    return app


app = create_app()

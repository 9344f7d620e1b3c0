"""
FastAPI Application

Main entry point for the Sales Dashboard API.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from salesdash.config import get_settings
from salesdash.config.logging import configure_logging
from salesdash.serving.api.errors import register_error_handlers
from salesdash.serving.api.middleware import RequestLoggingMiddleware
from salesdash.serving.api.routes import health_router, reports_router
from salesdash.serving.store import MemoryReportStore, ReportStore, close_redis, create_store

logger = structlog.get_logger(__name__)


def create_app(store: Optional[ReportStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Report store to serve; the configured backend is created at
            startup when omitted

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        logger.info("Starting Sales Dashboard API", environment=settings.app_env)

        if getattr(app.state, "store", None) is None:
            try:
                app.state.store = await create_store(settings)
                logger.info("Report store initialized", backend=settings.store.backend)
            except Exception as e:
                logger.error(f"Report store init failed, serving from memory: {e}")
                app.state.store = MemoryReportStore()

        yield

        logger.info("Shutting down...")
        await close_redis()

    app = FastAPI(
        title="Sales Dashboard API",
        description="Multi-channel branch sales reports: ingestion, editing and rollups",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(reports_router, prefix="/api/v1/report", tags=["Report"])

    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": "Sales Dashboard API",
            "version": settings.version,
            "environment": settings.app_env,
            "documentation": "/docs",
        }

    return app


app = create_app()


def run() -> None:
    """Console entry point serving the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()

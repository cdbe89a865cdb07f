"""
FastAPI application entry point hosting the TargetPay report URL.
"""
from fastapi import FastAPI

from api.routes import payments as payments_routes
from core.config import settings
from core.logging_config import configure_logging, get_logger


# Configure logging explicitly at the entry point, not on import
configure_logging()
logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
    )
    app.include_router(payments_routes.router, prefix="/api/v1")
    logger.info("application_configured", environment=settings.ENVIRONMENT)
    return app


app = create_app()

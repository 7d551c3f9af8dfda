"""Main application entry point for the restaurant booking service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI
from sqlalchemy import Engine

from restaurant_booking_service.handlers.api_handler import create_app
from restaurant_booking_service.observability import configure_logging, setup_observability
from restaurant_booking_service.repositories.database import (
    create_db_engine,
    create_session_factory,
    init_db,
    seed_menu,
)
from restaurant_booking_service.services.booking_service import BookingService
from restaurant_booking_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./restaurant_booking.db"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def get_database_engine() -> Engine:
    """Create the database engine from environment configuration.

    Returns:
        SQLAlchemy engine for DATABASE_URL (SQLite file by default)
    """
    database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    echo = _env_flag("DATABASE_ECHO")

    logger.info(f"Using database at {database_url.split('@')[-1]}")
    return create_db_engine(database_url, echo=echo)


def create_application(engine: Engine | None = None) -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the database engine and tables
    3. Optionally seeds the demo menu
    4. Creates services
    5. Creates the FastAPI app
    6. Optionally sets up observability

    Args:
        engine: Engine to use instead of one built from DATABASE_URL

    Returns:
        Configured FastAPI application instance
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Initializing restaurant booking service...")

    if engine is None:
        engine = get_database_engine()

    init_db(engine)
    session_factory = create_session_factory(engine)

    if _env_flag("SEED_MENU"):
        seed_menu(session_factory)

    menu_service = MenuService(session_factory=session_factory)
    booking_service = BookingService(session_factory=session_factory)

    logger.info("Services initialized")

    app = create_app(menu_service=menu_service, booking_service=booking_service)

    if _env_flag("ENABLE_OBSERVABILITY"):
        setup_observability(app=app, engine=engine)

    logger.info("Restaurant booking service initialized successfully")

    return app


# Skip app creation during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )

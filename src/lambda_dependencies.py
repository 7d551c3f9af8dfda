"""Shared dependency factory for the Lambda handler.

Dependencies are created once and reused across invocations within the same
Lambda container to keep cold starts cheap.
"""

import logging
import os

from fastapi import FastAPI
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from restaurant_booking_service.handlers.api_handler import create_app
from restaurant_booking_service.observability import configure_logging
from restaurant_booking_service.repositories.database import (
    create_db_engine,
    create_session_factory,
    init_db,
)
from restaurant_booking_service.services.booking_service import BookingService
from restaurant_booking_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None
_fastapi_app: FastAPI | None = None


def get_engine() -> Engine:
    """Create or retrieve the cached database engine.

    Tables are created on first use.

    Returns:
        SQLAlchemy engine configured from DATABASE_URL

    Raises:
        ValueError: If DATABASE_URL is not set
    """
    global _engine

    if _engine is not None:
        return _engine

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL must be set in environment")

    _engine = create_db_engine(database_url)
    init_db(_engine)

    logger.info("Database engine initialized")
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Create or retrieve the cached session factory."""
    global _session_factory

    if _session_factory is None:
        _session_factory = create_session_factory(get_engine())

    return _session_factory


def get_fastapi_app() -> FastAPI:
    """Create or retrieve the cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    session_factory = get_session_factory()
    _fastapi_app = create_app(
        menu_service=MenuService(session_factory=session_factory),
        booking_service=BookingService(session_factory=session_factory),
    )

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment logging.

    Should be called once during Lambda cold start.
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Lambda environment initialized")


def reset_cache() -> None:
    """Drop cached dependencies so the next call rebuilds them."""
    global _engine, _session_factory, _fastapi_app

    if _engine is not None:
        _engine.dispose()

    _engine = None
    _session_factory = None
    _fastapi_app = None

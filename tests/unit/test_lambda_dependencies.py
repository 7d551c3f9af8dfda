"""Unit tests for Lambda dependency factory."""

import os
from collections.abc import Iterator
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

from src import lambda_dependencies
from src.lambda_dependencies import (
    get_engine,
    get_fastapi_app,
    get_session_factory,
    initialize_lambda_environment,
    reset_cache,
)


@pytest.fixture(autouse=True)
def clear_cache() -> Iterator[None]:
    """Start and finish every test with empty caches."""
    reset_cache()
    yield
    reset_cache()


@pytest.mark.unit
class TestGetEngine:
    """Tests for get_engine function."""

    @patch.dict(os.environ, {"DATABASE_URL": "sqlite://"}, clear=True)
    def test_creates_engine_and_tables(self) -> None:
        """Test that the engine is built from DATABASE_URL with tables created."""
        engine = get_engine()

        assert str(engine.url) == "sqlite://"
        with engine.connect() as connection:
            tables = connection.exec_driver_sql(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).scalars().all()
        assert "dishes" in tables
        assert "bookings" in tables

    @patch.dict(os.environ, {"DATABASE_URL": "sqlite://"}, clear=True)
    def test_engine_is_cached(self) -> None:
        """Test that repeated calls return the same engine."""
        assert get_engine() is get_engine()

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_database_url_raises(self) -> None:
        """Test that DATABASE_URL is required in Lambda."""
        with pytest.raises(ValueError, match="DATABASE_URL must be set"):
            get_engine()


@pytest.mark.unit
class TestGetFastapiApp:
    """Tests for get_fastapi_app function."""

    @patch.dict(os.environ, {"DATABASE_URL": "sqlite://"}, clear=True)
    def test_creates_and_caches_app(self) -> None:
        """Test that the app is built once and reused."""
        app = get_fastapi_app()

        assert isinstance(app, FastAPI)
        assert get_fastapi_app() is app

    @patch.dict(os.environ, {"DATABASE_URL": "sqlite://"}, clear=True)
    def test_app_services_share_session_factory(self) -> None:
        """Test that both services use the cached session factory."""
        app = get_fastapi_app()
        session_factory = get_session_factory()

        assert app.state.menu_service.session_factory is session_factory
        assert app.state.booking_service.session_factory is session_factory


@pytest.mark.unit
class TestResetCache:
    """Tests for reset_cache function."""

    def test_disposes_engine(self) -> None:
        """Test that the cached engine is disposed and forgotten."""
        mock_engine = MagicMock()
        lambda_dependencies._engine = mock_engine

        reset_cache()

        mock_engine.dispose.assert_called_once()
        assert lambda_dependencies._engine is None


@pytest.mark.unit
class TestInitializeLambdaEnvironment:
    """Tests for initialize_lambda_environment function."""

    @patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}, clear=True)
    @patch("src.lambda_dependencies.configure_logging")
    def test_configures_logging(self, mock_configure_logging: Mock) -> None:
        """Test that logging is configured from LOG_LEVEL."""
        initialize_lambda_environment()

        mock_configure_logging.assert_called_once_with("WARNING")

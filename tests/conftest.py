"""Shared pytest fixtures and configuration for all tests."""

import os

# Must be set before entry-point modules are imported
os.environ["ENVIRONMENT"] = "test"

from collections.abc import Callable, Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from restaurant_booking_service.handlers.api_handler import create_app  # noqa: E402
from restaurant_booking_service.repositories.database import (  # noqa: E402
    create_db_engine,
    create_session_factory,
    init_db,
    seed_menu,
)
from restaurant_booking_service.repositories.tables import BookingRecord, DishRecord  # noqa: E402
from restaurant_booking_service.services.booking_service import BookingService  # noqa: E402
from restaurant_booking_service.services.menu_service import MenuService  # noqa: E402


@pytest.fixture
def engine() -> Iterator[Engine]:
    """Fresh in-memory SQLite database with tables created."""
    db_engine = create_db_engine("sqlite://")
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to the per-test database."""
    return create_session_factory(engine)


@pytest.fixture
def seeded_session_factory(session_factory: sessionmaker[Session]) -> sessionmaker[Session]:
    """Session factory whose database holds the four sample dishes.

    Dish 1: 20 available, Dish 2: 30, Dish 3: 40, Dish 4: 10.
    """
    seed_menu(session_factory)
    return session_factory


@pytest.fixture
def menu_service(seeded_session_factory: sessionmaker[Session]) -> MenuService:
    """MenuService over the seeded database."""
    return MenuService(session_factory=seeded_session_factory)


@pytest.fixture
def booking_service(seeded_session_factory: sessionmaker[Session]) -> BookingService:
    """BookingService over the seeded database."""
    return BookingService(session_factory=seeded_session_factory)


@pytest.fixture
def client(menu_service: MenuService, booking_service: BookingService) -> TestClient:
    """Test client for the API backed by the seeded database."""
    return TestClient(create_app(menu_service=menu_service, booking_service=booking_service))


@pytest.fixture
def get_dish_quantity(
    seeded_session_factory: sessionmaker[Session],
) -> Callable[[int], int | None]:
    """Read a dish's available quantity straight from the database."""

    def _get(dish_id: int) -> int | None:
        with seeded_session_factory() as session:
            dish = session.get(DishRecord, dish_id)
            return dish.available_quantity if dish else None

    return _get


@pytest.fixture
def count_bookings(seeded_session_factory: sessionmaker[Session]) -> Callable[[], int]:
    """Count booking rows straight from the database."""

    def _count() -> int:
        with seeded_session_factory() as session:
            return session.query(BookingRecord).count()

    return _count


@pytest.fixture
def insert_booking(
    seeded_session_factory: sessionmaker[Session],
) -> Callable[[int, int, int], None]:
    """Insert a booking row directly, without touching dish stock."""

    def _insert(booking_id: int, dish_id: int, booked_quantity: int) -> None:
        with seeded_session_factory.begin() as session:
            session.add(
                BookingRecord(id=booking_id, dish_id=dish_id, booked_quantity=booked_quantity)
            )

    return _insert

"""Database engine and session factory helpers.

Engines and session factories are created explicitly and handed to the
services, so every caller (the app factory, the Lambda container, each test)
owns its own store instead of sharing a module-level connection.
"""

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import Engine, create_engine, event, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from restaurant_booking_service.repositories.tables import Base, DishRecord

logger = logging.getLogger(__name__)

# Demo menu used by SEED_MENU and the test suite
DEFAULT_MENU: list[dict[str, Any]] = [
    {"id": 1, "name": "Dish 1", "description": "Demo1", "price": Decimal("10"), "available_quantity": 20},
    {"id": 2, "name": "Dish 2", "description": "Demo1", "price": Decimal("10"), "available_quantity": 30},
    {"id": 3, "name": "Dish 3", "description": "Demo1", "price": Decimal("10"), "available_quantity": 40},
    {"id": 4, "name": "Dish 3", "description": "Demo1", "price": Decimal("10"), "available_quantity": 10},
]


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:  # noqa: ARG001
    """Turn on foreign key enforcement for a new SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for the given URL.

    SQLite connections are shared across threads (FastAPI runs sync work in a
    threadpool) and have foreign keys enabled. In-memory SQLite uses a single
    static connection so every session sees the same database.

    Args:
        database_url: SQLAlchemy database URL
        echo: Whether to log all SQL statements

    Returns:
        Configured Engine
    """
    kwargs: dict[str, Any] = {"echo": echo}
    is_sqlite = database_url.startswith("sqlite")

    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)

    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to the engine.

    Objects stay readable after commit so services can build response models
    from rows they just wrote.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)
    logger.info("Database tables created")


def seed_menu(
    session_factory: sessionmaker[Session],
    dishes: list[dict[str, Any]] | None = None,
) -> int:
    """Insert demo dishes when the dishes table is empty.

    Args:
        session_factory: Session factory for the target database
        dishes: Dish column values to insert (defaults to DEFAULT_MENU)

    Returns:
        Number of dishes inserted (0 if the table already had rows)
    """
    dishes = DEFAULT_MENU if dishes is None else dishes

    with session_factory.begin() as session:
        existing = session.scalar(select(func.count()).select_from(DishRecord))
        if existing:
            logger.info(f"Menu already has {existing} dishes, skipping seed")
            return 0

        session.add_all([DishRecord(**values) for values in dishes])

    logger.info(f"Seeded menu with {len(dishes)} dishes")
    return len(dishes)

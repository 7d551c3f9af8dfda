"""Relational repository classes for dishes and bookings.

Each repository wraps a single SQLAlchemy session. The caller owns the
session and its transaction, so several repository calls made through the
same session commit or roll back together. Lookups return None for missing
rows rather than raising; database errors propagate to the caller.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from restaurant_booking_service.repositories.tables import BookingRecord, DishRecord

logger = logging.getLogger(__name__)

# Primary keys are stored as signed 64-bit integers
MIN_ROW_ID = -(2**63)
MAX_ROW_ID = 2**63 - 1


def _storable_id(row_id: int) -> bool:
    return MIN_ROW_ID <= row_id <= MAX_ROW_ID


class DishRepository:
    """Repository for dish reads and stock updates."""

    def __init__(self, session: Session) -> None:
        """Initialize repository.

        Args:
            session: Active SQLAlchemy session
        """
        self.session = session

    def list_dishes(self) -> list[DishRecord]:
        """List all dishes in primary key order.

        Returns:
            list: All dish rows (empty list if none)
        """
        return list(self.session.scalars(select(DishRecord).order_by(DishRecord.id)))

    def get_dish(self, dish_id: int) -> DishRecord | None:
        """Retrieve a dish by ID.

        Args:
            dish_id: Dish identifier

        Returns:
            DishRecord if found, None otherwise (including IDs no row can have)
        """
        if not _storable_id(dish_id):
            return None
        return self.session.get(DishRecord, dish_id)

    def add_dish(self, dish: DishRecord) -> DishRecord:
        """Insert a dish and assign its ID.

        Args:
            dish: Dish row to insert

        Returns:
            DishRecord: The inserted row with its generated ID
        """
        self.session.add(dish)
        self.session.flush()
        return dish

    def adjust_quantity(self, dish: DishRecord, delta: int) -> DishRecord:
        """Change a dish's available quantity by delta.

        The UPDATE is applied to the stored value, not to the quantity loaded
        into this session, and the non-negative CHECK constraint applies to
        its result.

        Args:
            dish: Dish row loaded in this session
            delta: Amount to add (negative to decrement)

        Returns:
            DishRecord: The row refreshed from the store

        Raises:
            ValueError: If the result would be negative for the loaded quantity
            IntegrityError: If the stored quantity would go negative
        """
        new_quantity = dish.available_quantity + delta
        if new_quantity < 0:
            raise ValueError(
                f"available_quantity for dish {dish.id} cannot go below zero ({new_quantity})"
            )

        self.session.execute(
            update(DishRecord)
            .where(DishRecord.id == dish.id)
            .values(available_quantity=DishRecord.available_quantity + delta)
            .execution_options(synchronize_session=False)
        )
        self.session.refresh(dish)
        return dish


class BookingRepository:
    """Repository for booking inserts, reads, and deletes."""

    def __init__(self, session: Session) -> None:
        """Initialize repository.

        Args:
            session: Active SQLAlchemy session
        """
        self.session = session

    def get_booking(self, booking_id: int) -> BookingRecord | None:
        """Retrieve a booking by ID.

        Args:
            booking_id: Booking identifier

        Returns:
            BookingRecord if found, None otherwise (including IDs no row can have)
        """
        if not _storable_id(booking_id):
            return None
        return self.session.get(BookingRecord, booking_id)

    def list_bookings(self) -> list[BookingRecord]:
        """List all active bookings in primary key order."""
        return list(self.session.scalars(select(BookingRecord).order_by(BookingRecord.id)))

    def list_bookings_for_dish(self, dish_id: int) -> list[BookingRecord]:
        """List active bookings that reference a dish.

        Args:
            dish_id: Dish identifier

        Returns:
            list: Booking rows for the dish (empty list if none)
        """
        if not _storable_id(dish_id):
            return []
        statement = (
            select(BookingRecord)
            .where(BookingRecord.dish_id == dish_id)
            .order_by(BookingRecord.id)
        )
        return list(self.session.scalars(statement))

    def add_booking(self, dish_id: int, booked_quantity: int) -> BookingRecord:
        """Insert a booking and assign its ID.

        Args:
            dish_id: Dish being reserved
            booked_quantity: Quantity reserved

        Returns:
            BookingRecord: The inserted row with its generated ID
        """
        booking = BookingRecord(dish_id=dish_id, booked_quantity=booked_quantity)
        self.session.add(booking)
        self.session.flush()
        logger.debug(f"Inserted booking {booking.id} for dish {dish_id} x{booked_quantity}")
        return booking

    def delete_booking(self, booking: BookingRecord) -> None:
        """Delete a booking row.

        Args:
            booking: Booking row loaded in this session
        """
        self.session.delete(booking)
        self.session.flush()
        logger.debug(f"Deleted booking {booking.id}")

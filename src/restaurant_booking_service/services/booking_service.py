"""Booking service for reserving and releasing dish stock."""

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from restaurant_booking_service.models.menu_models import Booking, Dish
from restaurant_booking_service.observability.decorators import traced
from restaurant_booking_service.observability.metrics import (
    record_booking_cancelled,
    record_booking_created,
    record_booking_rejected,
)
from restaurant_booking_service.repositories.booking_repositories import (
    BookingRepository,
    DishRepository,
)

logger = logging.getLogger(__name__)

BOOKING_SUCCESS_MESSAGE = "Booking successful!"
CANCELLATION_SUCCESS_MESSAGE = "Booking cancellation successful!"
DISH_NOT_FOUND_MESSAGE = "Dish not found."
BOOKING_NOT_FOUND_MESSAGE = "Booking not found."
INVALID_QUANTITY_MESSAGE = "Invalid quantity or dish not available."


class BookingErrorType(str, Enum):
    """Reasons a booking request is rejected."""

    NOT_FOUND = "not_found"
    INVALID_QUANTITY = "invalid_quantity"


@dataclass
class BookingResult:
    """Result of a create or cancel operation.

    Attributes:
        success: Whether the operation was applied
        message: Confirmation message on success, None otherwise
        error_type: Rejection reason on failure, None otherwise
        error_message: User-visible error message on failure, None otherwise
        booking: The created or removed booking on success
        dish: The dish after its stock was adjusted on success
    """

    success: bool
    message: str | None = None
    error_type: BookingErrorType | None = None
    error_message: str | None = None
    booking: Booking | None = None
    dish: Dish | None = None


class BookingService:
    """Service for creating and cancelling bookings.

    Every create or cancel runs in its own transaction opened from the
    session factory: the dish stock change and the booking insert/delete are
    committed together or rolled back together. Requests are validated before
    anything is written.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """Initialize the BookingService.

        Args:
            session_factory: Factory that opens a session per operation
        """
        self.session_factory = session_factory

    async def list_dishes_for_booking(self) -> list[Dish]:
        """List the dishes a customer can choose from.

        Returns:
            List of Dish models in store order
        """
        with self.session_factory() as session:
            return [Dish.model_validate(d) for d in DishRepository(session).list_dishes()]

    @traced("list_bookings")
    async def list_bookings(self) -> list[Booking]:
        """List all active bookings.

        Returns:
            List of Booking models, empty list if there are none
        """
        with self.session_factory() as session:
            return [Booking.model_validate(b) for b in BookingRepository(session).list_bookings()]

    @traced("create_booking", record_args=("dish_id", "quantity"))
    async def create_booking(self, dish_id: int, quantity: int) -> BookingResult:
        """Reserve quantity units of a dish.

        The flow:
        1. Look up the dish (missing -> NOT_FOUND)
        2. Check 0 < quantity <= available_quantity (otherwise INVALID_QUANTITY)
        3. Decrement the dish stock and insert the booking in one transaction

        Args:
            dish_id: The dish to book
            quantity: Number of units to reserve

        Returns:
            BookingResult with the new booking and updated dish on success

        Raises:
            SQLAlchemyError: If the store fails; nothing is committed
        """
        try:
            with self.session_factory.begin() as session:
                dishes = DishRepository(session)
                dish = dishes.get_dish(dish_id)

                if dish is None:
                    return self._rejected(
                        "create", BookingErrorType.NOT_FOUND, DISH_NOT_FOUND_MESSAGE, dish_id=dish_id
                    )

                if quantity <= 0 or quantity > dish.available_quantity:
                    return self._rejected(
                        "create",
                        BookingErrorType.INVALID_QUANTITY,
                        INVALID_QUANTITY_MESSAGE,
                        dish_id=dish_id,
                        quantity=quantity,
                        available=dish.available_quantity,
                    )

                dishes.adjust_quantity(dish, -quantity)
                booking = BookingRepository(session).add_booking(dish.id, quantity)

                created = Booking.model_validate(booking)
                updated = Dish.model_validate(dish)

        except SQLAlchemyError:
            logger.exception(f"Failed to create booking for dish {dish_id}, transaction rolled back")
            raise

        logger.info(
            f"Booked {quantity} x dish {dish_id} (booking {created.id}), "
            f"{updated.available_quantity} left"
        )
        record_booking_created(dish_id, quantity)
        return BookingResult(
            success=True, message=BOOKING_SUCCESS_MESSAGE, booking=created, dish=updated
        )

    @traced("cancel_booking", record_args=("booking_id",))
    async def cancel_booking(self, booking_id: int) -> BookingResult:
        """Cancel a booking and return its quantity to the dish.

        The booking row is deleted, so cancelling the same ID again is
        NOT_FOUND and never restores stock twice.

        Args:
            booking_id: The booking to cancel

        Returns:
            BookingResult with the removed booking and updated dish on success

        Raises:
            SQLAlchemyError: If the store fails; nothing is committed
        """
        try:
            with self.session_factory.begin() as session:
                bookings = BookingRepository(session)
                booking = bookings.get_booking(booking_id)

                if booking is None:
                    return self._rejected(
                        "cancel",
                        BookingErrorType.NOT_FOUND,
                        BOOKING_NOT_FOUND_MESSAGE,
                        booking_id=booking_id,
                    )

                dishes = DishRepository(session)
                dish = dishes.get_dish(booking.dish_id)

                # Unreachable while foreign keys are enforced
                if dish is None:
                    logger.error(f"Booking {booking_id} references missing dish {booking.dish_id}")
                    return self._rejected(
                        "cancel",
                        BookingErrorType.NOT_FOUND,
                        DISH_NOT_FOUND_MESSAGE,
                        booking_id=booking_id,
                        dish_id=booking.dish_id,
                    )

                removed = Booking.model_validate(booking)
                dishes.adjust_quantity(dish, booking.booked_quantity)
                bookings.delete_booking(booking)

                restored = Dish.model_validate(dish)

        except SQLAlchemyError:
            logger.exception(f"Failed to cancel booking {booking_id}, transaction rolled back")
            raise

        logger.info(
            f"Cancelled booking {booking_id}, restored {removed.booked_quantity} x dish {removed.dish_id}"
        )
        record_booking_cancelled(removed.dish_id)
        return BookingResult(
            success=True, message=CANCELLATION_SUCCESS_MESSAGE, booking=removed, dish=restored
        )

    def _rejected(
        self,
        operation: str,
        error_type: BookingErrorType,
        error_message: str,
        **context: int,
    ) -> BookingResult:
        """Build a failed result and record the rejection.

        Args:
            operation: "create" or "cancel"
            error_type: Why the request was rejected
            error_message: User-visible message
            **context: Identifiers included in the log line

        Returns:
            BookingResult with success=False
        """
        details = ", ".join(f"{key}={value}" for key, value in context.items())
        logger.warning(f"Rejected {operation} booking request ({error_type.value}): {details}")
        record_booking_rejected(operation, error_type.value)
        return BookingResult(success=False, error_type=error_type, error_message=error_message)

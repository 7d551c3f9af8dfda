"""Custom metrics for the booking service."""

from opentelemetry import metrics

meter = metrics.get_meter("booking-svc")

booking_created_counter = meter.create_counter(
    name="booking_created_total",
    description="Total number of bookings created by dish",
    unit="1",
)

booking_cancelled_counter = meter.create_counter(
    name="booking_cancelled_total",
    description="Total number of bookings cancelled by dish",
    unit="1",
)

booking_rejected_counter = meter.create_counter(
    name="booking_rejected_total",
    description="Total number of rejected booking requests by operation and reason",
    unit="1",
)

booked_quantity_histogram = meter.create_histogram(
    name="booking_quantity",
    description="Quantity reserved per booking",
    unit="1",
)


def record_booking_created(dish_id: int, quantity: int) -> None:
    """Record a successful booking.

    Args:
        dish_id: The dish that was booked
        quantity: Quantity reserved
    """
    booking_created_counter.add(1, {"dish_id": dish_id})
    booked_quantity_histogram.record(quantity, {"dish_id": dish_id})


def record_booking_cancelled(dish_id: int) -> None:
    """Record a cancelled booking.

    Args:
        dish_id: The dish whose stock was restored
    """
    booking_cancelled_counter.add(1, {"dish_id": dish_id})


def record_booking_rejected(operation: str, reason: str) -> None:
    """Record a rejected create or cancel request.

    Args:
        operation: "create" or "cancel"
        reason: Error type value (e.g., "not_found", "invalid_quantity")
    """
    booking_rejected_counter.add(1, {"operation": operation, "reason": reason})

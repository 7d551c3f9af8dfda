"""FastAPI application for the menu and booking endpoints."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError

from restaurant_booking_service.models.menu_models import Booking, Dish
from restaurant_booking_service.services.booking_service import (
    BookingErrorType,
    BookingResult,
    BookingService,
)
from restaurant_booking_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error."

# HTTP status returned for each rejection reason
ERROR_STATUS_CODES: dict[BookingErrorType, int] = {
    BookingErrorType.NOT_FOUND: 404,
    BookingErrorType.INVALID_QUANTITY: 400,
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class CreateBookingRequest(_CamelModel):
    """Request body for creating a booking."""

    dish_id: int = Field(..., description="Dish to book")
    quantity: int = Field(..., description="Quantity to reserve")


class CancelBookingRequest(_CamelModel):
    """Request body for cancelling a booking."""

    booking_id: int = Field(..., description="Booking to cancel")


class ConfirmationResponse(_CamelModel):
    """Response model for a successful create or cancel."""

    message: str
    booking: Booking | None = None
    dish: Dish | None = None


class ErrorResponse(_CamelModel):
    """Response model for a rejected request."""

    error_message: str


def _result_response(result: BookingResult) -> ConfirmationResponse | JSONResponse:
    """Map a service result to a confirmation or an error payload."""
    if result.success:
        return ConfirmationResponse(
            message=result.message or "",
            booking=result.booking,
            dish=result.dish,
        )

    status_code = ERROR_STATUS_CODES.get(result.error_type, 400)  # type: ignore[arg-type]
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error_message=result.error_message or "").model_dump(by_alias=True),
    )


def create_app(
    menu_service: MenuService,
    booking_service: BookingService,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service for reading the menu
        booking_service: Service for creating and cancelling bookings

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Booking Service API",
        description="Menu listing and dish booking with stock tracking",
        version="1.0.0",
    )

    app.state.menu_service = menu_service
    app.state.booking_service = booking_service

    @app.exception_handler(SQLAlchemyError)
    async def persistence_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """Turn storage failures into a generic 500 payload."""
        logger.error(f"Persistence failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error_message=INTERNAL_ERROR_MESSAGE).model_dump(by_alias=True),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    @app.get("/menu", response_model=list[Dish], tags=["Menu"])
    async def list_menu() -> list[Dish]:
        """List every dish on the menu."""
        dishes: list[Dish] = await app.state.menu_service.list_dishes()
        return dishes

    @app.get("/booking", response_model=list[Booking], tags=["Booking"])
    async def list_bookings() -> list[Booking]:
        """List all active bookings."""
        bookings: list[Booking] = await app.state.booking_service.list_bookings()
        return bookings

    @app.get("/booking/create", response_model=list[Dish], tags=["Booking"])
    async def booking_form() -> list[Dish]:
        """List the dishes available for a new booking."""
        dishes: list[Dish] = await app.state.booking_service.list_dishes_for_booking()
        return dishes

    @app.post(
        "/booking/create",
        response_model=ConfirmationResponse,
        responses={404: {"model": ErrorResponse}, 400: {"model": ErrorResponse}},
        tags=["Booking"],
    )
    async def create_booking(
        body: CreateBookingRequest,
    ) -> ConfirmationResponse | JSONResponse:
        """Book a quantity of a dish.

        Returns:
            Confirmation with the new booking, or an error payload when the
            dish is missing (404) or the quantity is invalid (400)
        """
        logger.info(f"Booking requested: dish {body.dish_id} x{body.quantity}")

        result = await app.state.booking_service.create_booking(
            dish_id=body.dish_id,
            quantity=body.quantity,
        )
        return _result_response(result)

    @app.post(
        "/booking/cancel",
        response_model=ConfirmationResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Booking"],
    )
    async def cancel_booking(
        body: CancelBookingRequest,
    ) -> ConfirmationResponse | JSONResponse:
        """Cancel a booking and restore the dish stock.

        Returns:
            Confirmation with the removed booking, or 404 when it does not exist
        """
        logger.info(f"Cancellation requested: booking {body.booking_id}")

        result = await app.state.booking_service.cancel_booking(booking_id=body.booking_id)
        return _result_response(result)

    return app

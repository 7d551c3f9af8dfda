"""Menu and booking data models.

These pydantic models are the wire representation of dishes and bookings.
They are built from ORM rows (``from_attributes``) and serialized with
camelCase aliases for API responses.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class Dish(BaseModel):
    """Menu item with its remaining stock."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int = Field(..., description="Unique identifier for the dish")
    name: str = Field(..., description="Dish name")
    description: str = Field(..., description="Dish description")
    price: Decimal = Field(..., description="Dish price", ge=0)
    available_quantity: int = Field(..., description="Remaining unreserved stock", ge=0)

    @field_serializer("price", when_used="json")
    def serialize_price(self, price: Decimal) -> str:
        """Serialize price as a string to keep its exact decimal value."""
        return str(price)


class Booking(BaseModel):
    """Reservation of a quantity of one dish."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int = Field(..., description="Unique identifier for the booking")
    dish_id: int = Field(..., description="Dish this booking reserves")
    booked_quantity: int = Field(..., description="Quantity reserved", gt=0)

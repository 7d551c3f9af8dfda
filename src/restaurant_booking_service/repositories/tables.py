"""SQLAlchemy table definitions for dishes and bookings."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all tables."""


class DishRecord(Base):
    """Row in the ``dishes`` table."""

    __tablename__ = "dishes"
    __table_args__ = (
        CheckConstraint("available_quantity >= 0", name="ck_dishes_available_quantity"),
        CheckConstraint("price >= 0", name="ck_dishes_price"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Dish #{self.id} - {self.name} - {self.available_quantity} available>"


class BookingRecord(Base):
    """Row in the ``bookings`` table."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("booked_quantity > 0", name="ck_bookings_booked_quantity"),
        # Never hand out the ID of a cancelled booking again
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dish_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("dishes.id"), nullable=False, index=True
    )
    booked_quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<Booking #{self.id} - dish {self.dish_id} x{self.booked_quantity}>"

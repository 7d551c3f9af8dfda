"""Menu service for listing dishes."""

import logging

from sqlalchemy.orm import Session, sessionmaker

from restaurant_booking_service.models.menu_models import Dish
from restaurant_booking_service.observability.decorators import traced
from restaurant_booking_service.repositories.booking_repositories import DishRepository

logger = logging.getLogger(__name__)


class MenuService:
    """Read-only access to the menu."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """Initialize the MenuService.

        Args:
            session_factory: Factory that opens a session per operation
        """
        self.session_factory = session_factory

    @traced("list_dishes")
    async def list_dishes(self) -> list[Dish]:
        """List every dish in store order.

        Returns:
            List of Dish models, empty list if the menu is empty
        """
        with self.session_factory() as session:
            records = DishRepository(session).list_dishes()
            dishes = [Dish.model_validate(record) for record in records]

        logger.debug(f"Listed {len(dishes)} dishes")
        return dishes

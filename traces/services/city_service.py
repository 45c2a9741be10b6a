"""Read access to a user's city visit rows."""

import logging

from beanie import PydanticObjectId
from bson.errors import InvalidId

from core.exceptions import ResourceNotFoundException, ValidationException
from db.models import CityVisit

logger = logging.getLogger(__name__)


class CityService:
    """Service class for city visit queries."""

    @staticmethod
    async def list_city_visits(user_id: str) -> list[CityVisit]:
        """All of a user's city visits, most recently visited first."""
        return (
            await CityVisit.find(CityVisit.user_id == user_id)
            .sort(-CityVisit.last_visit_date)
            .to_list()
        )

    @staticmethod
    async def list_lighted_cities(user_id: str) -> list[CityVisit]:
        return (
            await CityVisit.find(
                CityVisit.user_id == user_id,
                CityVisit.is_lighted == True,  # noqa: E712
            )
            .sort(-CityVisit.last_visit_date)
            .to_list()
        )

    @staticmethod
    async def get_city_visit(user_id: str, city_id: str) -> CityVisit:
        """
        Fetch one city visit owned by ``user_id``.

        Raises:
            ValidationException: If city_id is not a valid ObjectId
            ResourceNotFoundException: If the row does not exist or belongs
                to another user
        """
        try:
            object_id = PydanticObjectId(city_id)
        except (InvalidId, TypeError) as e:
            msg = f"Invalid city id: {city_id}"
            raise ValidationException(msg) from e

        visit = await CityVisit.get(object_id)
        if visit is None or visit.user_id != user_id:
            msg = f"City visit {city_id} not found"
            raise ResourceNotFoundException(msg)
        return visit

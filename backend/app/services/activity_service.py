# backend/app/services/activity_service.py

"""
Activity log engine.

Append-only: records are validated in full (every bad field is reported
at once) and inserted; nothing here updates or deletes them. The three
read shapes share `_find_page`, which turns filters into AND-ed predicates
and wraps the rows with pagination metadata. Results are always newest
first.
"""

from typing import Any, Dict, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError, validate_or_raise
from app.core.logger import logger
from app.crud import activity as activity_crud
from app.models.activity import Activity
from app.schemas.activity import ActivityCreate, ActivityFilters, ActivityList, ActivityOut
from app.schemas.common import Pagination

IdLike = Union[str, UUID, None]


def _require_id(value: IdLike, label: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{label} is required")


class ActivityService:

    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------
    # Append
    # ------------------------------------------------------------

    async def log_activity(self, data: Union[ActivityCreate, Dict[str, Any]]) -> Activity:
        """Validate and persist one activity record; `id` and `created_at` are assigned here."""
        activity_in = data if isinstance(data, ActivityCreate) else validate_or_raise(ActivityCreate, data)

        ip_address = str(activity_in.ip_address) if activity_in.ip_address is not None else None
        activity = await activity_crud.create_activity(
            self.db,
            user_id=activity_in.user_id,
            resource_id=activity_in.resource_id,
            action_type=activity_in.action_type,
            details=activity_in.details,
            ip_address=ip_address,
            user_agent=activity_in.user_agent,
        )

        logger.info(
            "Activity logged",
            extra={
                "user_id": activity.user_id,
                "resource_id": activity.resource_id,
                "action_type": activity.action_type.value,
            },
        )
        return activity

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    async def get_activity_logs(self, filters: Optional[Dict[str, Any]] = None) -> ActivityList:
        """Filtered listing; every supplied criterion must match."""
        return await self._find_page(validate_or_raise(ActivityFilters, filters or {}))

    async def get_activity_by_user(self, user_id: IdLike, page: Any = 1, page_size: Any = 10) -> ActivityList:
        _require_id(user_id, "User ID")
        filters = validate_or_raise(ActivityFilters, {"user_id": user_id, "page": page, "page_size": page_size})
        return await self._find_page(filters)

    async def get_activity_by_resource(self, resource_id: IdLike, page: Any = 1, page_size: Any = 10) -> ActivityList:
        _require_id(resource_id, "Resource ID")
        filters = validate_or_raise(ActivityFilters, {"resource_id": resource_id, "page": page, "page_size": page_size})
        return await self._find_page(filters)

    async def _find_page(self, filters: ActivityFilters) -> ActivityList:
        rows, total = await activity_crud.find_activities(
            self.db,
            build_conditions(filters),
            limit=filters.page_size,
            offset=filters.offset,
        )
        return ActivityList(
            activities=[ActivityOut.model_validate(row) for row in rows],
            pagination=Pagination.build(total, filters.page, filters.page_size),
        )


def build_conditions(filters: ActivityFilters) -> Tuple:
    conditions = []
    if filters.user_id:
        conditions.append(Activity.user_id == filters.user_id)
    if filters.resource_id:
        conditions.append(Activity.resource_id == filters.resource_id)
    if filters.action_type:
        conditions.append(Activity.action_type == filters.action_type)
    if filters.start_date:
        conditions.append(Activity.created_at >= filters.start_date)
    if filters.end_date:
        conditions.append(Activity.created_at <= filters.end_date)
    return tuple(conditions)

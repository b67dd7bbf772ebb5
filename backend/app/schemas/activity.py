# backend/app/schemas/activity.py

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, IPvAnyAddress, field_validator, model_validator

from app.models.activity import ActionTypeEnum
from app.schemas.common import CamelModel, PageParams, Pagination
from app.schemas.resource import ResourceSummary
from app.schemas.user import UserSummary

MAX_USER_AGENT_LENGTH = 2000


# ---------------------------------------------------------------
# Append input
# ---------------------------------------------------------------

class ActivityCreate(BaseModel):
    user_id: UUID
    resource_id: Optional[UUID] = None
    action_type: ActionTypeEnum
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[IPvAnyAddress] = None
    user_agent: Optional[str] = Field(None, max_length=MAX_USER_AGENT_LENGTH)


# ---------------------------------------------------------------
# Query filters
# ---------------------------------------------------------------

def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ActivityFilters(PageParams):
    """All criteria are optional and combine with AND."""

    user_id: Optional[UUID] = None
    resource_id: Optional[UUID] = None
    action_type: Optional[ActionTypeEnum] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalise_timezone(cls, value):
        return _as_utc(value)

    @model_validator(mode="after")
    def check_date_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be before or equal to end_date")
        return self


# ---------------------------------------------------------------
# Output
# ---------------------------------------------------------------

class ActivityRecord(CamelModel):
    id: UUID
    user_id: UUID
    resource_id: Optional[UUID] = None
    action_type: ActionTypeEnum
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime


class ActivityOut(ActivityRecord):
    user: Optional[UserSummary] = None
    resource: Optional[ResourceSummary] = None


class ActivityList(CamelModel):
    activities: List[ActivityOut]
    pagination: Pagination

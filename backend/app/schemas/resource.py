# backend/app/schemas/resource.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import AnyUrl, Field, field_validator, model_validator

from app.models.resource import ResourceStatusEnum, ResourceTypeEnum
from app.schemas.common import CamelModel, PageParams, Pagination


class ResourceCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    type: ResourceTypeEnum
    url: AnyUrl
    tags: Optional[str] = None
    status: ResourceStatusEnum


class ResourceUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    type: Optional[ResourceTypeEnum] = None
    url: Optional[AnyUrl] = None
    tags: Optional[str] = None
    status: Optional[ResourceStatusEnum] = None

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        nulled = sorted(
            field for field in self.model_fields_set
            if field != "tags" and getattr(self, field) is None
        )
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self

    def changes(self) -> dict:
        """Only the fields the caller actually sent, as plain storable values."""
        data = self.model_dump(exclude_unset=True)
        if data.get("url") is not None:
            data["url"] = str(data["url"])
        return data


class ResourceSummary(CamelModel):
    id: UUID
    title: str
    type: ResourceTypeEnum
    status: ResourceStatusEnum


class Resource(CamelModel):
    id: UUID
    title: str
    description: str
    type: ResourceTypeEnum
    url: str
    tags: Optional[str] = None
    status: ResourceStatusEnum
    created_by_user_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ResourceListQuery(PageParams):
    search: Optional[str] = None
    type: Optional[ResourceTypeEnum] = None
    status: Optional[ResourceStatusEnum] = None
    tag: Optional[str] = None

    @field_validator("search", "tag")
    @classmethod
    def blank_is_none(cls, value):
        if value is not None and not value.strip():
            return None
        return value


class ResourceList(CamelModel):
    resources: List[Resource]
    pagination: Pagination

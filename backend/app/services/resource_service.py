# backend/app/services/resource_service.py

"""
Resource mutations with an audit trail.

Each mutation commits first and only then records its activity through the
AuditTrail; a failed primary write raises and records nothing. Archiving is
a soft delete (status -> Archived) and is a no-op on an archived resource.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, validate_or_raise
from app.core.logger import logger
from app.crud import resource as resource_crud
from app.models.activity import ActionTypeEnum
from app.models.resource import Resource, ResourceStatusEnum
from app.schemas.common import Pagination
from app.schemas.resource import (
    Resource as ResourceSchema,
    ResourceCreate,
    ResourceList,
    ResourceListQuery,
    ResourceUpdate,
)
from app.services.audit import AuditTrail, RequestContext

ARCHIVED_MESSAGE = "Resource archived successfully"
ALREADY_ARCHIVED_MESSAGE = "Resource already archived"


@dataclass
class ArchiveResult:
    message: str
    resource: Resource
    archived: bool


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def diff_fields(before: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """{field: {from, to}} for each requested field whose value actually changes."""
    changed = {}
    for field, new_value in changes.items():
        old_value = _plain(before.get(field))
        new_value = _plain(new_value)
        if old_value != new_value:
            changed[field] = {"from": old_value, "to": new_value}
    return changed


class ResourceService:

    def __init__(self, db: AsyncSession, audit: AuditTrail):
        self.db = db
        self.audit = audit

    async def _get_or_404(self, resource_id: UUID) -> Resource:
        resource = await resource_crud.get_resource(self.db, resource_id)
        if not resource:
            raise NotFoundError("Resource not found")
        return resource

    async def add_resource(self, resource_in: ResourceCreate, ctx: RequestContext) -> Resource:
        data = resource_in.model_dump()
        data["url"] = str(resource_in.url)
        resource = await resource_crud.create_resource(self.db, **data, created_by_user_id=ctx.user_id)

        logger.info("Resource created", extra={"resource_id": resource.id, "user_id": ctx.user_id})
        self.audit.record(
            ctx,
            ActionTypeEnum.CREATE,
            resource.id,
            {
                "title": resource.title,
                "type": _plain(resource.type),
                "status": _plain(resource.status),
            },
        )
        return resource

    async def get_resource(self, resource_id: UUID, ctx: Optional[RequestContext] = None, path: Optional[str] = None) -> Resource:
        resource = await self._get_or_404(resource_id)
        if ctx is not None:
            self.audit.record(ctx, ActionTypeEnum.VIEW, resource.id, {"method": "GET", "path": path})
        return resource

    async def update_resource(self, resource_id: UUID, resource_in: ResourceUpdate, ctx: RequestContext) -> Resource:
        resource = await self._get_or_404(resource_id)

        changes = resource_in.changes()
        before = {field: getattr(resource, field) for field in changes}
        resource = await resource_crud.update_resource(self.db, resource, changes)

        logger.info("Resource updated", extra={"resource_id": resource.id, "user_id": ctx.user_id})
        self.audit.record(
            ctx,
            ActionTypeEnum.UPDATE,
            resource.id,
            {"changedFields": diff_fields(before, changes), "title": resource.title},
        )
        return resource

    async def archive_resource(self, resource_id: UUID, ctx: RequestContext) -> ArchiveResult:
        resource = await self._get_or_404(resource_id)

        if resource.status == ResourceStatusEnum.Archived:
            return ArchiveResult(ALREADY_ARCHIVED_MESSAGE, resource, archived=False)

        previous_status = _plain(resource.status)
        resource = await resource_crud.update_resource(
            self.db, resource, {"status": ResourceStatusEnum.Archived}
        )

        logger.info("Resource archived", extra={"resource_id": resource.id, "user_id": ctx.user_id})
        self.audit.record(
            ctx,
            ActionTypeEnum.DELETE,
            resource.id,
            {
                "title": resource.title,
                "type": _plain(resource.type),
                "previousStatus": previous_status,
                "action": "archived",
            },
        )
        return ArchiveResult(ARCHIVED_MESSAGE, resource, archived=True)

    async def list_resources(self, query: Union[ResourceListQuery, Dict[str, Any]]) -> ResourceList:
        if not isinstance(query, ResourceListQuery):
            query = validate_or_raise(ResourceListQuery, query)
        rows, total = await resource_crud.list_resources(self.db, query)
        return ResourceList(
            resources=[ResourceSchema.model_validate(row) for row in rows],
            pagination=Pagination.build(total, query.page, query.page_size),
        )

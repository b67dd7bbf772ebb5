# backend/app/api/deps.py

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.services.activity_service import ActivityService
from app.services.audit import AuditTrail, RequestContext
from app.services.resource_service import ResourceService


def get_audit_trail(request: Request) -> AuditTrail:
    return request.app.state.audit


def get_request_context(request: Request, user: User = Depends(get_current_user)) -> RequestContext:
    return RequestContext(
        user_id=user.id,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        request_id=request.scope.get("request_id"),
    )


def get_activity_service(db: AsyncSession = Depends(get_db)) -> ActivityService:
    return ActivityService(db)


def get_resource_service(
    db: AsyncSession = Depends(get_db),
    audit: AuditTrail = Depends(get_audit_trail),
) -> ResourceService:
    return ResourceService(db, audit)


def present_params(**params) -> dict:
    # raw query values go to the services, which own validation and defaults
    return {key: value for key, value in params.items() if value is not None}

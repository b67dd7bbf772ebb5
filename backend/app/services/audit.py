# backend/app/services/audit.py

"""
Best-effort audit hook.

A mutation that has already committed hands its activity to `AuditTrail.record`,
which spawns a detached task with its own database session. The caller never
awaits that task: if the append fails, the failure is logged as an
AuditWriteError and dropped, and the primary result stands.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import AuditWriteError
from app.core.logger import logger
from app.models.activity import ActionTypeEnum
from app.services.activity_service import ActivityService


@dataclass(frozen=True)
class RequestContext:
    """Who is acting and from where."""

    user_id: UUID
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    request_id: Optional[str] = None


class AuditTrail:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def record(
        self,
        ctx: RequestContext,
        action_type: ActionTypeEnum,
        resource_id: Optional[UUID],
        details: Optional[Dict[str, Any]] = None,
    ) -> asyncio.Task:
        activity = {
            "user_id": ctx.user_id,
            "resource_id": resource_id,
            "action_type": action_type,
            "details": details,
            "ip_address": ctx.ip_address,
            "user_agent": ctx.user_agent,
        }
        task = asyncio.create_task(self._write(activity, ctx.request_id))
        # the loop only keeps weak references to tasks
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _write(self, activity: Dict[str, Any], request_id: Optional[str]) -> None:
        action_type = getattr(activity["action_type"], "value", activity["action_type"])
        try:
            async with self._session_factory() as session:
                await ActivityService(session).log_activity(activity)
        except Exception as exc:
            failure = AuditWriteError(action_type, exc)
            logger.error(
                failure.message,
                exc_info=exc,
                extra={
                    "request_id": request_id,
                    "user_id": activity["user_id"],
                    "resource_id": activity["resource_id"],
                    "action_type": action_type,
                },
            )

    async def drain(self) -> None:
        """Wait for every audit write started so far."""
        while True:
            pending = [task for task in self._pending if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

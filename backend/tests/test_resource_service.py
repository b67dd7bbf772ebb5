"""
Resource mutations and the audit hook that follows each of them.
"""

import asyncio
import logging
import uuid

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select

from app.core.exceptions import NotFoundError, ValidationError
from app.models import Activity, ActionTypeEnum, Resource, ResourceStatusEnum
from app.schemas.resource import ResourceCreate, ResourceUpdate
from app.services.activity_service import ActivityService
from app.services.audit import RequestContext
from app.services.resource_service import (
    ALREADY_ARCHIVED_MESSAGE,
    ARCHIVED_MESSAGE,
    ResourceService,
    diff_fields,
)


def resource_payload(**overrides):
    payload = {
        "title": "A",
        "description": "A first resource",
        "type": "Article",
        "url": "https://example.com/a",
        "tags": "python,sql",
        "status": "Published",
    }
    payload.update(overrides)
    return ResourceCreate(**payload)


async def stored_activities(session_factory, **criteria):
    """Read activities through a fresh session, oldest first."""
    async with session_factory() as session:
        q = select(Activity).filter_by(**criteria).order_by(Activity.created_at, Activity.id)
        return list((await session.scalars(q)).all())


@pytest.fixture
def service(db, audit_trail):
    return ResourceService(db, audit_trail)


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_records_one_activity(self, service, audit_trail, session_factory, ctx, manager):
        resource = await service.add_resource(resource_payload(), ctx)
        await audit_trail.drain()

        activities = await stored_activities(session_factory)
        assert len(activities) == 1
        activity = activities[0]
        assert activity.action_type == ActionTypeEnum.CREATE
        assert activity.user_id == manager.id
        assert activity.resource_id == resource.id
        assert activity.details == {"title": "A", "type": "Article", "status": "Published"}
        assert activity.ip_address == "10.0.0.7"
        assert activity.user_agent == "pytest-agent/1.0"

    @pytest.mark.asyncio
    async def test_creator_is_the_actor(self, service, ctx, manager):
        resource = await service.add_resource(resource_payload(), ctx)

        assert resource.created_by_user_id == manager.id
        assert resource.url == "https://example.com/a"


class TestLifecycleScenario:

    @pytest.mark.asyncio
    async def test_create_update_archive_twice(self, service, audit_trail, session_factory, ctx):
        resource = await service.add_resource(resource_payload(), ctx)
        await audit_trail.drain()

        await service.update_resource(resource.id, ResourceUpdate(status="Draft"), ctx)
        await audit_trail.drain()

        first = await service.archive_resource(resource.id, ctx)
        await audit_trail.drain()
        second = await service.archive_resource(resource.id, ctx)
        await audit_trail.drain()

        assert first.archived is True
        assert first.message == ARCHIVED_MESSAGE
        assert second.archived is False
        assert second.message == ALREADY_ARCHIVED_MESSAGE
        assert second.resource.status == ResourceStatusEnum.Archived

        activities = await stored_activities(session_factory, resource_id=resource.id)
        assert [a.action_type for a in activities] == [
            ActionTypeEnum.CREATE,
            ActionTypeEnum.UPDATE,
            ActionTypeEnum.DELETE,
        ]
        assert activities[0].details["status"] == "Published"
        assert activities[1].details["changedFields"] == {"status": {"from": "Published", "to": "Draft"}}
        assert activities[1].details["title"] == "A"
        assert activities[2].details == {
            "title": "A",
            "type": "Article",
            "previousStatus": "Draft",
            "action": "archived",
        }

    @pytest.mark.asyncio
    async def test_archive_is_soft(self, service, session_factory, ctx):
        resource = await service.add_resource(resource_payload(), ctx)
        await service.archive_resource(resource.id, ctx)

        async with session_factory() as session:
            stored = await session.get(Resource, resource.id)
        assert stored is not None
        assert stored.status == ResourceStatusEnum.Archived


class TestUpdateDiff:

    @pytest.mark.asyncio
    async def test_only_changed_fields_are_listed(self, service, audit_trail, session_factory, ctx):
        resource = await service.add_resource(resource_payload(), ctx)

        await service.update_resource(
            resource.id,
            ResourceUpdate(title="A", description="Rewritten", type="Video"),
            ctx,
        )
        await audit_trail.drain()

        update = (await stored_activities(session_factory, action_type=ActionTypeEnum.UPDATE))[0]
        assert update.details["changedFields"] == {
            "description": {"from": "A first resource", "to": "Rewritten"},
            "type": {"from": "Article", "to": "Video"},
        }

    @pytest.mark.asyncio
    async def test_resubmitting_same_values_gives_empty_diff(self, service, audit_trail, session_factory, ctx):
        resource = await service.add_resource(resource_payload(), ctx)

        await service.update_resource(resource.id, ResourceUpdate(title="A", status="Published"), ctx)
        await audit_trail.drain()

        update = (await stored_activities(session_factory, action_type=ActionTypeEnum.UPDATE))[0]
        assert update.details == {"changedFields": {}, "title": "A"}

    @pytest.mark.asyncio
    async def test_title_in_details_is_the_new_title(self, service, audit_trail, session_factory, ctx):
        resource = await service.add_resource(resource_payload(), ctx)

        await service.update_resource(resource.id, ResourceUpdate(title="B"), ctx)
        await audit_trail.drain()

        update = (await stored_activities(session_factory, action_type=ActionTypeEnum.UPDATE))[0]
        assert update.details["title"] == "B"
        assert update.details["changedFields"] == {"title": {"from": "A", "to": "B"}}

    def test_diff_fields_unwraps_enums(self):
        before = {"status": ResourceStatusEnum.Published, "tags": None}
        changes = {"status": ResourceStatusEnum.Archived, "tags": "x"}

        assert diff_fields(before, changes) == {
            "status": {"from": "Published", "to": "Archived"},
            "tags": {"from": None, "to": "x"},
        }

    @pytest.mark.parametrize("payload", [{}, {"title": None}, {"status": "Gone"}, {"url": "not a url"}])
    def test_invalid_update_payloads(self, payload):
        with pytest.raises(PydanticValidationError):
            ResourceUpdate(**payload)


class TestAuditIsolation:

    @pytest.mark.asyncio
    async def test_failed_audit_write_does_not_fail_the_mutation(
        self, service, audit_trail, session_factory, ctx, monkeypatch, caplog
    ):
        async def broken(self, data):
            raise RuntimeError("activity store unavailable")

        monkeypatch.setattr(ActivityService, "log_activity", broken)

        with caplog.at_level(logging.ERROR, logger="learnhub"):
            resource = await service.add_resource(resource_payload(), ctx)
            await audit_trail.drain()

        async with session_factory() as session:
            assert await session.get(Resource, resource.id) is not None
        assert await stored_activities(session_factory) == []
        assert any("Failed to log CREATE activity" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_invalid_client_address_only_drops_the_activity(
        self, service, audit_trail, session_factory, manager, caplog
    ):
        ctx = RequestContext(user_id=manager.id, ip_address="testclient", user_agent="pytest-agent/1.0")

        with caplog.at_level(logging.ERROR, logger="learnhub"):
            resource = await service.add_resource(resource_payload(), ctx)
            await audit_trail.drain()

        assert resource.id is not None
        assert await stored_activities(session_factory) == []
        assert any("Failed to log CREATE activity" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_caller_does_not_wait_for_the_audit_write(
        self, service, audit_trail, session_factory, ctx, monkeypatch
    ):
        gate = asyncio.Event()
        original = ActivityService.log_activity

        async def gated(self, data):
            await gate.wait()
            return await original(self, data)

        monkeypatch.setattr(ActivityService, "log_activity", gated)

        resource = await service.add_resource(resource_payload(), ctx)

        assert resource.id is not None
        assert audit_trail.pending == 1

        gate.set()
        await audit_trail.drain()

        assert audit_trail.pending == 0
        assert len(await stored_activities(session_factory, resource_id=resource.id)) == 1

    @pytest.mark.asyncio
    async def test_missing_resource_records_nothing(self, service, audit_trail, session_factory, ctx):
        missing = uuid.uuid4()

        with pytest.raises(NotFoundError):
            await service.update_resource(missing, ResourceUpdate(title="B"), ctx)
        with pytest.raises(NotFoundError):
            await service.archive_resource(missing, ctx)
        with pytest.raises(NotFoundError):
            await service.get_resource(missing, ctx, path="/api/resource/x")
        await audit_trail.drain()

        assert audit_trail.pending == 0
        assert await stored_activities(session_factory) == []


class TestViewAndList:

    @pytest.mark.asyncio
    async def test_get_with_context_records_view(self, service, audit_trail, session_factory, ctx):
        resource = await service.add_resource(resource_payload(), ctx)
        path = f"/api/resource/{resource.id}"

        fetched = await service.get_resource(resource.id, ctx, path=path)
        await audit_trail.drain()

        assert fetched.id == resource.id
        views = await stored_activities(session_factory, action_type=ActionTypeEnum.VIEW)
        assert len(views) == 1
        assert views[0].details == {"method": "GET", "path": path}

    @pytest.mark.asyncio
    async def test_get_without_context_is_silent(self, service, audit_trail, session_factory, ctx):
        resource = await service.add_resource(resource_payload(), ctx)
        await audit_trail.drain()

        await service.get_resource(resource.id)
        await audit_trail.drain()

        assert len(await stored_activities(session_factory)) == 1

    @pytest.mark.asyncio
    async def test_list_filters(self, service, ctx):
        await service.add_resource(resource_payload(title="Python basics", tags="python"), ctx)
        await service.add_resource(resource_payload(title="SQL joins", type="Video", tags="sql,db"), ctx)
        await service.add_resource(
            resource_payload(title="Async IO", description="Python event loops", status="Draft", tags=None), ctx
        )

        by_search = await service.list_resources({"search": "python"})
        by_type = await service.list_resources({"type": "Video"})
        by_status = await service.list_resources({"status": "Draft"})
        by_tag = await service.list_resources({"tag": "SQL"})
        everything = await service.list_resources({"search": "  "})

        assert {r.title for r in by_search.resources} == {"Python basics", "Async IO"}
        assert [r.title for r in by_type.resources] == ["SQL joins"]
        assert [r.title for r in by_status.resources] == ["Async IO"]
        assert [r.title for r in by_tag.resources] == ["SQL joins"]
        assert everything.pagination.total == 3

    @pytest.mark.asyncio
    async def test_list_pagination(self, service, ctx):
        for i in range(7):
            await service.add_resource(resource_payload(title=f"R{i}"), ctx)

        result = await service.list_resources({"page": 2, "page_size": 5})

        assert result.pagination.total == 7
        assert result.pagination.total_pages == 2
        assert len(result.resources) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", [{"page": 0}, {"page": 10 ** 19}, {"page_size": 0}, {"page_size": 101}, {"type": "Podcast"}])
    async def test_list_rejects_bad_query(self, service, query):
        with pytest.raises(ValidationError):
            await service.list_resources(query)

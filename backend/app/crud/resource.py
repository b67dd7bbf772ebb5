# backend/app/crud/resource.py

from typing import List, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StoreError
from app.models.resource import Resource
from app.schemas.resource import ResourceListQuery


async def get_resource(db: AsyncSession, resource_id: UUID):
    return await db.scalar(select(Resource).where(Resource.id == resource_id))


async def _commit(db: AsyncSession, obj: Resource) -> Resource:
    try:
        await db.commit()
        await db.refresh(obj)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StoreError(f"Failed to save resource: {exc.__class__.__name__}") from exc
    return obj


async def create_resource(db: AsyncSession, **fields) -> Resource:
    obj = Resource(**fields)
    db.add(obj)
    return await _commit(db, obj)


async def update_resource(db: AsyncSession, resource: Resource, changes: dict) -> Resource:
    for field, value in changes.items():
        setattr(resource, field, value)
    db.add(resource)
    return await _commit(db, resource)


async def list_resources(db: AsyncSession, query: ResourceListQuery) -> Tuple[List[Resource], int]:
    conditions = []
    if query.search:
        pattern = f"%{query.search}%"
        conditions.append(or_(Resource.title.ilike(pattern), Resource.description.ilike(pattern)))
    if query.type:
        conditions.append(Resource.type == query.type)
    if query.status:
        conditions.append(Resource.status == query.status)
    if query.tag:
        conditions.append(Resource.tags.ilike(f"%{query.tag}%"))

    q = (
        select(Resource)
        .where(*conditions)
        .order_by(Resource.created_at.desc())
        .limit(query.page_size)
        .offset(query.offset)
    )
    rows = (await db.scalars(q)).all()
    total = await db.scalar(select(func.count(Resource.id)).where(*conditions))
    return list(rows), total or 0

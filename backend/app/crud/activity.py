# backend/app/crud/activity.py

from typing import List, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.activity import Activity
from app.models.resource import Resource
from app.models.user import User


async def create_activity(db: AsyncSession, **fields) -> Activity:
    entry = Activity(**fields)
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


async def find_activities(
    db: AsyncSession,
    conditions: Sequence,
    limit: int,
    offset: int,
) -> Tuple[List[Activity], int]:
    """
    One page of activities matching every condition, newest first, plus the
    count of all matching rows. Actor and resource are loaded alongside with
    only their public columns; a missing row leaves the attribute as None.
    """
    q = (
        select(Activity)
        .where(*conditions)
        .options(
            selectinload(Activity.user).load_only(User.id, User.name, User.email, User.role),
            selectinload(Activity.resource).load_only(
                Resource.id, Resource.title, Resource.type, Resource.status
            ),
        )
        .order_by(Activity.created_at.desc(), Activity.id.desc())
        .limit(limit)
        .offset(offset)
    )
    rows = (await db.scalars(q)).all()

    total = await db.scalar(select(func.count(Activity.id)).where(*conditions))
    return list(rows), total or 0

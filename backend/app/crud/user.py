from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.models.user import User
from app.schemas.user import UserCreate


async def get_user(db: AsyncSession, user_id: UUID):
    return await db.scalar(select(User).where(User.id == user_id))


async def get_user_by_email(db: AsyncSession, email: str):
    return await db.scalar(select(User).where(User.email == email))


async def create_user(db: AsyncSession, user_in: UserCreate) -> User:
    obj = User(name=user_in.name, email=user_in.email, role=user_in.role)
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return obj

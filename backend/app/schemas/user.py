from pydantic import EmailStr
from uuid import UUID

from app.models.user import UserRoleEnum
from app.schemas.common import CamelModel


class UserSummary(CamelModel):
    """Public identity of an actor. Never carries credentials."""

    id: UUID
    name: str
    email: EmailStr
    role: UserRoleEnum


class UserCreate(CamelModel):
    name: str
    email: EmailStr
    role: UserRoleEnum = UserRoleEnum.VIEWER

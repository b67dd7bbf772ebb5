# backend/app/models/user.py

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, TIMESTAMP, Uuid, Enum as SAEnum

from app.core.database import Base


def utcnow():
    return datetime.now(timezone.utc)


class UserRoleEnum(str, enum.Enum):
    CONTENT_MANAGER = "CONTENT_MANAGER"
    VIEWER = "VIEWER"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(
        SAEnum(UserRoleEnum, name="user_role", native_enum=False),
        nullable=False,
        default=UserRoleEnum.VIEWER,
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

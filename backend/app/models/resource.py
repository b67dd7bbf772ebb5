# backend/app/models/resource.py

import enum
import uuid

from sqlalchemy import Column, String, Text, TIMESTAMP, Uuid, ForeignKey, Enum as SAEnum

from app.core.database import Base
from app.models.user import utcnow


class ResourceTypeEnum(str, enum.Enum):
    Article = "Article"
    Video = "Video"
    Tutorial = "Tutorial"


class ResourceStatusEnum(str, enum.Enum):
    Draft = "Draft"
    Published = "Published"
    Archived = "Archived"


class Resource(Base):
    __tablename__ = "resources"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(SAEnum(ResourceTypeEnum, name="resource_type", native_enum=False), nullable=False)
    url = Column(String(2048), nullable=False)
    tags = Column(String(1024), nullable=True)   # comma separated
    status = Column(
        SAEnum(ResourceStatusEnum, name="resource_status", native_enum=False),
        nullable=False,
        default=ResourceStatusEnum.Draft,
    )
    created_by_user_id = Column(
        Uuid,
        ForeignKey("users.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

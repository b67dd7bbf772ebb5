# backend/app/models/activity.py

import enum
import uuid

from sqlalchemy import Column, String, Text, TIMESTAMP, Uuid, ForeignKey, JSON, Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.user import utcnow


class ActionTypeEnum(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    VIEW = "VIEW"


class Activity(Base):
    """
    One immutable audit fact: `user_id` did `action_type` to `resource_id`.

    Rows are only ever inserted. Deleting the actor cascades to their
    history; deleting the resource keeps the row and nulls the link.
    """

    __tablename__ = "activities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resource_id = Column(
        Uuid,
        ForeignKey("resources.id", onupdate="CASCADE", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action_type = Column(
        SAEnum(ActionTypeEnum, name="activity_action_type", native_enum=False),
        nullable=False,
        index=True,
    )
    details = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, index=True)

    # read-time enrichment only; both may resolve to None
    user = relationship("User")
    resource = relationship("Resource")

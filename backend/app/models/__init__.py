from .user import User, UserRoleEnum
from .resource import Resource, ResourceTypeEnum, ResourceStatusEnum
from .activity import Activity, ActionTypeEnum
from ..core.database import Base
__all__ = [
    "User",
    "UserRoleEnum",
    "Resource",
    "ResourceTypeEnum",
    "ResourceStatusEnum",
    "Activity",
    "ActionTypeEnum",
    "Base"
]

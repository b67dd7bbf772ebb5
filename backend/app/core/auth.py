# backend/app/core/auth.py

import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.crud.user import get_user
from app.models.user import User, UserRoleEnum

security = HTTPBearer(auto_error=False)


# ------------------------------------------------
# TOKEN ISSUE / DECODE
# ------------------------------------------------
def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    expires_delta = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "user_id": str(user.id),
        "email": user.email,
        "role": UserRoleEnum(user.role).value,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")


# ------------------------------------------------
# CURRENT USER
# ------------------------------------------------
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to a live user. The token must still match
    the stored user: a removed account or a changed email invalidates it.
    """
    if credentials is None:
        raise AuthenticationError("Authorization header is required")

    payload = decode_token(credentials.credentials)
    try:
        user_id = UUID(str(payload.get("user_id")))
    except ValueError:
        raise AuthenticationError("Invalid token payload")

    user = await get_user(db, user_id)
    if not user:
        raise AuthenticationError("User not found")
    if user.email != payload.get("email"):
        raise AuthenticationError("Token is no longer valid")

    return user


# ------------------------------------------------
# ROLE GATE
# ------------------------------------------------
def require_role(*roles: UserRoleEnum):
    """Dependency that lets only the given roles through."""

    async def wrapper(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise AuthorizationError("ACCESS_DENIED")
        return user

    return wrapper

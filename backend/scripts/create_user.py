"""
Create (or reuse) a user and print a bearer token for it.

    python -m scripts.create_user --name "Ada" --email ada@example.com --role CONTENT_MANAGER
"""

import argparse
import asyncio

from app.core.auth import create_access_token
from app.core.database import AsyncSessionLocal, Base, engine
from app.core.logger import logger
from app.crud.user import create_user, get_user_by_email
from app.models.user import UserRoleEnum
from app.schemas.user import UserCreate

import app.models  # noqa: F401  (register every table for create_all)


# ------------------------------------------------------------
# CLI
# ------------------------------------------------------------
def parse_args():
    parser = argparse.ArgumentParser(description="Create a user and issue an access token")
    parser.add_argument("--name", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRoleEnum],
        default=UserRoleEnum.VIEWER.value,
    )
    return parser.parse_args()


async def main():
    args = parse_args()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        user = await get_user_by_email(db, args.email)
        if user:
            logger.info("User already exists", extra={"user_id": user.id})
        else:
            user = await create_user(
                db, UserCreate(name=args.name, email=args.email, role=UserRoleEnum(args.role))
            )
            logger.info("User created", extra={"user_id": user.id})

    print(f"user_id: {user.id}")
    print(f"role:    {UserRoleEnum(user.role).value}")
    print(f"token:   {create_access_token(user)}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())

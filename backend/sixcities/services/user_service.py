"""
Six Cities Backend — User Service
===================================

What:  Persistence operations for user accounts and password hashing.
Who:   UserController (registration, avatar) and AuthService (login).
"""

import logging
from typing import Optional

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from sixcities.database import session_scope
from sixcities.exceptions import ConflictError
from sixcities.models.user import User
from sixcities.schemas.user import CreateUserDto

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


class UserService:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def create(self, dto: CreateUserDto) -> User:
        user = User(
            name=dto.name,
            email=dto.email,
            avatar=dto.avatar,
            type=dto.type.value,
            password_hash=hash_password(dto.password),
        )
        try:
            async with session_scope(self._session_factory) as db:
                db.add(user)
                await db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same e-mail
            logger.warning("Registration conflict for %s: %s", dto.email, str(e.orig))
            raise ConflictError(
                f"User with email «{dto.email}» exists.", source="UserService"
            ) from e
        logger.info("New user created: %s", user.email)
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        async with session_scope(self._session_factory) as db:
            result = await db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str) -> Optional[User]:
        async with session_scope(self._session_factory) as db:
            return await db.get(User, user_id)

    async def update_avatar(self, user_id: str, avatar: str) -> Optional[User]:
        async with session_scope(self._session_factory) as db:
            user = await db.get(User, user_id)
            if user is None:
                return None
            user.avatar = avatar
            await db.flush()
        logger.info("Avatar updated for user %s", user_id)
        return user

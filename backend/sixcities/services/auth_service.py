"""
Six Cities Backend — Authentication Service
=============================================

What:  Checks login credentials, issues bearer tokens and verifies them.
How:   Tokens are HS256 JWTs signed with JWT_SECRET:

           {"sub": <user id>, "email": ..., "name": ..., "iat": ..., "exp": ...}

       `verify` is the TokenVerifier used by the RequireAuthentication
       middleware; every failure surfaces as UnauthorizedError (401).
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt

from sixcities.exceptions import UnauthorizedError
from sixcities.models.user import User
from sixcities.rest.types import TokenPayload
from sixcities.schemas.user import LoginUserDto
from sixcities.services.user_service import UserService, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        user_service: UserService,
        secret: str,
        algorithm: str = "HS256",
        expiration_seconds: int = 172_800,
    ):
        self._user_service = user_service
        self._secret = secret
        self._algorithm = algorithm
        self._expiration = timedelta(seconds=expiration_seconds)

    async def verify_credentials(self, dto: LoginUserDto) -> User:
        """Return the user whose e-mail and password match, else raise 401."""
        user = await self._user_service.find_by_email(dto.email)
        if user is None:
            logger.warning("Login failed: unknown e-mail %s", dto.email)
            raise UnauthorizedError("Incorrect email or password", source="AuthService")
        if not verify_password(dto.password, user.password_hash):
            logger.warning("Login failed: wrong password for %s", dto.email)
            raise UnauthorizedError("Incorrect email or password", source="AuthService")
        return user

    def authenticate(self, user: User) -> str:
        """Issue a signed token for `user`."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "email": user.email,
            "name": user.name,
            "iat": now,
            "exp": now + self._expiration,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    async def verify(self, token: str) -> TokenPayload:
        try:
            data = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token expired", source="AuthService")
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid token", source="AuthService")

        try:
            return TokenPayload(id=data["sub"], email=data["email"], name=data["name"])
        except KeyError as e:
            raise UnauthorizedError(f"Token is missing claim {e}", source="AuthService")

"""
Six Cities Backend — Auth Service Unit Tests
==============================================

Token issuing and verification with PyJWT, credential checks against a mocked
UserService.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import jwt
import pytest

from sixcities.exceptions import UnauthorizedError
from sixcities.rest.types import TokenPayload
from sixcities.schemas.user import LoginUserDto
from sixcities.services.auth_service import AuthService
from sixcities.services.user_service import UserService

from conftest import USER_ID

SECRET = "unit-test-secret-that-is-long-enough"


class TestAuthService:
    def setup_method(self):
        self.user_service = MagicMock(spec=UserService)
        self.service = AuthService(self.user_service, secret=SECRET, expiration_seconds=3600)

    # ── Tokens ────────────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_issued_token_verifies(self, sample_user):
        token = self.service.authenticate(sample_user)

        principal = await self.service.verify(token)

        assert principal == TokenPayload(id=USER_ID, email="keks@example.com", name="Keks")

    def test_token_claims(self, sample_user):
        token = self.service.authenticate(sample_user)

        claims = jwt.decode(token, SECRET, algorithms=["HS256"])

        assert claims["sub"] == USER_ID
        assert claims["exp"] - claims["iat"] == 3600

    @pytest.mark.asyncio
    async def test_expired_token(self, sample_user):
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": USER_ID, "email": "a@b.c", "name": "A", "iat": issued, "exp": issued + timedelta(hours=1)},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(UnauthorizedError, match="Token expired"):
            await self.service.verify(token)

    @pytest.mark.asyncio
    async def test_wrong_signature(self, sample_user):
        other = AuthService(self.user_service, secret="another-secret-that-is-long-enough")
        token = other.authenticate(sample_user)

        with pytest.raises(UnauthorizedError, match="Invalid token"):
            await self.service.verify(token)

    @pytest.mark.asyncio
    async def test_garbage_token(self):
        with pytest.raises(UnauthorizedError, match="Invalid token"):
            await self.service.verify("not.a.jwt")

    @pytest.mark.asyncio
    async def test_missing_claim(self):
        token = jwt.encode({"sub": USER_ID}, SECRET, algorithm="HS256")

        with pytest.raises(UnauthorizedError, match="missing claim"):
            await self.service.verify(token)

    # ── Credentials ───────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_valid_credentials(self, sample_user):
        self.user_service.find_by_email.return_value = sample_user

        user = await self.service.verify_credentials(
            LoginUserDto(email="keks@example.com", password="secret1")
        )

        assert user is sample_user

    @pytest.mark.asyncio
    async def test_wrong_password(self, sample_user):
        self.user_service.find_by_email.return_value = sample_user

        with pytest.raises(UnauthorizedError):
            await self.service.verify_credentials(
                LoginUserDto(email="keks@example.com", password="nope-nope")
            )

    @pytest.mark.asyncio
    async def test_unknown_email(self):
        self.user_service.find_by_email.return_value = None

        with pytest.raises(UnauthorizedError):
            await self.service.verify_credentials(
                LoginUserDto(email="ghost@example.com", password="secret1")
            )

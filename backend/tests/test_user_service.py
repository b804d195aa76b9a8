"""
Six Cities Backend — User Service Unit Tests
==============================================

Runs against a mocked session factory; no database required.
"""

from types import SimpleNamespace

import bcrypt
import pytest
from sqlalchemy.exc import IntegrityError

from sixcities.exceptions import ConflictError
from sixcities.models.user import User
from sixcities.schemas.user import CreateUserDto, UserType
from sixcities.services.user_service import UserService, hash_password, verify_password

from conftest import USER_ID


class TestPasswordHashing:
    def test_hash_verifies(self):
        hashed = hash_password("secret1")
        assert hashed != "secret1"
        assert verify_password("secret1", hashed)

    def test_wrong_password(self):
        assert not verify_password("secret2", hash_password("secret1"))

    def test_malformed_hash(self):
        assert not verify_password("secret1", "not-a-bcrypt-hash")


class TestUserService:
    @pytest.fixture(autouse=True)
    def _service(self, mock_session_factory, mock_db_session):
        self.db = mock_db_session
        self.service = UserService(mock_session_factory)

    @pytest.mark.asyncio
    async def test_create_hashes_password(self):
        dto = CreateUserDto(name="Keks", email="keks@example.com", password="secret1", type=UserType.PRO)

        user = await self.service.create(dto)

        assert isinstance(user, User)
        assert user.email == "keks@example.com"
        assert user.type == "pro"
        assert bcrypt.checkpw(b"secret1", user.password_hash.encode("utf-8"))
        self.db.add.assert_called_once_with(user)
        self.db.flush.assert_awaited_once()
        self.db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_email_race_is_conflict(self):
        self.db.flush.side_effect = IntegrityError(
            "INSERT INTO users", {}, Exception("duplicate key value violates unique constraint")
        )
        dto = CreateUserDto(name="Keks", email="keks@example.com", password="secret1")

        with pytest.raises(ConflictError) as exc_info:
            await self.service.create(dto)

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "User with email «keks@example.com» exists."
        self.db.rollback.assert_awaited_once()
        self.db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_find_by_email(self):
        stored = SimpleNamespace(id=USER_ID, email="keks@example.com")
        self.db.execute.return_value.scalar_one_or_none.return_value = stored

        assert await self.service.find_by_email("keks@example.com") is stored

    @pytest.mark.asyncio
    async def test_find_by_id(self):
        self.db.get.return_value = None

        assert await self.service.find_by_id(USER_ID) is None
        self.db.get.assert_awaited_once_with(User, USER_ID)

    @pytest.mark.asyncio
    async def test_update_avatar(self):
        stored = SimpleNamespace(id=USER_ID, avatar=None)
        self.db.get.return_value = stored

        user = await self.service.update_avatar(USER_ID, "abc.png")

        assert user is stored
        assert stored.avatar == "abc.png"
        self.db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_avatar_unknown_user(self):
        self.db.get.return_value = None

        assert await self.service.update_avatar(USER_ID, "abc.png") is None
        self.db.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_rolls_back(self):
        self.db.execute.side_effect = ConnectionError("db down")

        with pytest.raises(ConnectionError):
            await self.service.find_by_email("keks@example.com")

        self.db.rollback.assert_awaited_once()
        self.db.commit.assert_not_awaited()
        self.db.close.assert_awaited_once()

"""
Six Cities Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   No test needs a database. Services are either unit-tested against a
       mocked session factory, or replaced by class-shaped mocks and injected into
       create_app() for end-to-end HTTP tests.

Fixtures:
    mock_db_session / mock_session_factory   service unit tests
    services                                 mocked persistence + real AuthService/FileStore
    test_client                              HTTPX AsyncClient over ASGITransport
    sample_user / other_user / sample_offer / sample_comment
    auth_headers                             bearer token for sample_user
"""

import os
import tempfile
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import bcrypt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any sixcities import: settings are read at import time
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["UPLOAD_DIRECTORY"] = tempfile.mkdtemp(prefix="sixcities_test_")
os.environ["LOG_LEVEL"] = "WARNING"

from sixcities.composition import Services  # noqa: E402
from sixcities.config import settings  # noqa: E402
from sixcities.services.auth_service import AuthService  # noqa: E402
from sixcities.services.comment_service import CommentService  # noqa: E402
from sixcities.services.file_store import FileStore  # noqa: E402
from sixcities.services.offer_service import OfferService  # noqa: E402
from sixcities.services.user_service import UserService  # noqa: E402

USER_ID = "65a1f0c2b4d5e6f7a8b9c0d1"
OTHER_USER_ID = "65a1f0c2b4d5e6f7a8b9c0d2"
OFFER_ID = "65b2e1d3c4f5a6b7c8d9e0f1"
COMMENT_ID = "65c3f2e4d5a6b7c8d9e0f1a2"
MISSING_ID = "000000000000000000000000"

OFFER_IMAGES = [f"https://img.example.com/{n}.jpg" for n in range(1, 7)]


def valid_offer_body(**overrides):
    body = {
        "title": "Cozy loft near the canal",
        "description": "Bright loft with a view of the canal and a big kitchen.",
        "city": "Amsterdam",
        "previewImage": "https://img.example.com/preview.jpg",
        "images": list(OFFER_IMAGES),
        "isPremium": True,
        "type": "apartment",
        "bedrooms": 2,
        "maxAdults": 4,
        "price": 1200,
        "goods": ["Breakfast", "Washer"],
        "location": {"latitude": 52.3909553943508, "longitude": 4.85309666406198},
    }
    body.update(overrides)
    return body


# ══════════════════════════════════════════════════════════════════════════
# Persistence Mocks (service unit tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock(return_value=MagicMock())
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_session_factory(mock_db_session):
    """Callable returning an async context manager that yields mock_db_session."""
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=mock_db_session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "upload"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Smallest valid JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


# ══════════════════════════════════════════════════════════════════════════
# Domain Objects
# ══════════════════════════════════════════════════════════════════════════

def _user(user_id: str, name: str, email: str) -> SimpleNamespace:
    return SimpleNamespace(
        id=user_id,
        name=name,
        email=email,
        avatar=None,
        type="ordinary",
        password_hash=bcrypt.hashpw(b"secret1", bcrypt.gensalt(rounds=4)).decode("utf-8"),
        created_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_user():
    return _user(USER_ID, "Keks", "keks@example.com")


@pytest.fixture
def other_user():
    return _user(OTHER_USER_ID, "Oliver", "oliver@example.com")


@pytest.fixture
def make_offer(sample_user):
    """Factory for offer-like objects owned by `author` (default: sample_user)."""

    def _make(author=None, **overrides):
        author = author or sample_user
        data = dict(
            id=OFFER_ID,
            title="Cozy loft near the canal",
            description="Bright loft with a view of the canal and a big kitchen.",
            created_at=datetime(2024, 1, 16, tzinfo=timezone.utc),
            city="Amsterdam",
            preview_image="https://img.example.com/preview.jpg",
            images=list(OFFER_IMAGES),
            is_premium=True,
            rating=4.2,
            type="apartment",
            bedrooms=2,
            max_adults=4,
            price=1200,
            goods=["Breakfast", "Washer"],
            comment_count=3,
            latitude=52.3909553943508,
            longitude=4.85309666406198,
            author_id=author.id,
            author=author,
        )
        data.update(overrides)
        data["location"] = {"latitude": data["latitude"], "longitude": data["longitude"]}
        return SimpleNamespace(**data)

    return _make


@pytest.fixture
def sample_offer(make_offer):
    return make_offer()


@pytest.fixture
def sample_comment(sample_user):
    return SimpleNamespace(
        id=COMMENT_ID,
        text="Lovely place, would stay again.",
        rating=5,
        created_at=datetime(2024, 1, 17, tzinfo=timezone.utc),
        offer_id=OFFER_ID,
        author_id=sample_user.id,
        author=sample_user,
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def services():
    """
    Service graph for HTTP tests.

    Persistence services are class-shaped mocks (async methods become AsyncMock);
    AuthService and FileStore are real so tokens and uploads behave as in
    production.
    """
    user_service = MagicMock(spec=UserService)
    offer_service = MagicMock(spec=OfferService)
    comment_service = MagicMock(spec=CommentService)
    return Services(
        user_service=user_service,
        offer_service=offer_service,
        comment_service=comment_service,
        auth_service=AuthService(
            user_service,
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiration_seconds=settings.jwt_expiration_seconds,
        ),
        file_store=FileStore(max_file_size=settings.max_file_size),
    )


@pytest.fixture
def auth_headers(services, sample_user):
    token = services.auth_service.authenticate(sample_user)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def test_client(services):
    """
    HTTPX AsyncClient talking to an app wired with the `services` fixture.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from sixcities.main import create_app

    app = create_app(services=services)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

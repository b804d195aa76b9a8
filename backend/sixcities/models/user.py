"""
Six Cities Backend — User SQLAlchemy Model
============================================

What:  ORM model for the `users` table.
Who:   Used by UserService and AuthService; referenced as `author` by offers
       and comments.

Table Design:
    - id: 24-hex identifier generated in Python (see database.generate_identifier)
    - email: unique, looked up on every login and registration
    - password_hash: bcrypt hash, never serialized
    - type: 'ordinary' or 'pro'
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from sixcities.database import IDENTIFIER_LENGTH, Base, generate_identifier


class User(Base):
    """A registered account that can author offers and comments."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        primary_key=True,
        default=generate_identifier,
    )
    name: Mapped[str] = mapped_column(String(15), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="ordinary")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"

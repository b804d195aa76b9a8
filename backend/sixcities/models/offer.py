"""
Six Cities Backend — Offer SQLAlchemy Model
=============================================

What:  ORM model for the `offers` table and the `favorites` association table.
Who:   Used by OfferService (CRUD, favorites, premium listing) and
       CommentService (rating recalculation).

Table Design Rationale:
    - images / goods: JSON arrays; they are always read and written whole
    - latitude / longitude: flat columns, exposed as a `location` object
    - rating / comment_count: denormalized, recomputed when a comment is added
    - author: eagerly joined, since every offer response embeds its author

Query Patterns:
    - Latest offers: ORDER BY created_at DESC LIMIT :n  → idx_offers_created_at
    - Premium offers of a city: WHERE city = :c AND is_premium → idx_offers_city_premium
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sixcities.database import IDENTIFIER_LENGTH, Base, generate_identifier
from sixcities.models.user import User

# Many-to-many: which users marked which offers as favorite
favorites = Table(
    "favorites",
    Base.metadata,
    Column(
        "user_id",
        String(IDENTIFIER_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "offer_id",
        String(IDENTIFIER_LENGTH),
        ForeignKey("offers.id", ondelete="CASCADE"),
        nullable=False,
    ),
    PrimaryKeyConstraint("user_id", "offer_id"),
)


class Offer(Base):
    """A rental listing published by a user."""

    __tablename__ = "offers"

    id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        primary_key=True,
        default=generate_identifier,
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    city: Mapped[str] = mapped_column(String(32), nullable=False)
    preview_image: Mapped[str] = mapped_column(String(255), nullable=False)
    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    is_premium: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    max_adults: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    goods: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    author_id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    author: Mapped[Optional[User]] = relationship(User, lazy="joined")

    __table_args__ = (
        Index("idx_offers_created_at", created_at.desc()),
        Index("idx_offers_city_premium", "city", "is_premium"),
    )

    @property
    def location(self) -> Dict[str, Any]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    def __repr__(self) -> str:
        return f"<Offer(id={self.id}, city='{self.city}', title='{self.title}')>"

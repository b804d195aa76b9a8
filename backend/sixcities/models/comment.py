"""
Six Cities Backend — Comment SQLAlchemy Model
===============================================

What:  ORM model for the `comments` table (user reviews of an offer).
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sixcities.database import IDENTIFIER_LENGTH, Base, generate_identifier
from sixcities.models.user import User


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        primary_key=True,
        default=generate_identifier,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    offer_id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        ForeignKey("offers.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[str] = mapped_column(
        String(IDENTIFIER_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    author: Mapped[Optional[User]] = relationship(User, lazy="joined")

    # Comments are always listed per offer, newest first
    __table_args__ = (
        Index("idx_comments_offer_created", "offer_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, offer_id={self.offer_id}, rating={self.rating})>"

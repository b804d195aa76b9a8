"""
Six Cities Backend — Offer Service
====================================

What:  Persistence operations for rental offers and the favorites relation.
How:   One `session_scope` per call. Offers are always loaded with their
       author (joined eager load on the relationship), so responses can embed
       the author after the session is closed.

Listing rules:
    find()                   newest first, at most `limit`
    find_premium_by_city()   premium offers of one city, newest first, at most 3
    find_favorite()          the user's favorites, newest first
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import delete, desc, func, insert, select, update
from sqlalchemy.ext.asyncio import async_sessionmaker

from sixcities.database import session_scope
from sixcities.models.comment import Comment
from sixcities.models.offer import Offer, favorites
from sixcities.schemas.offer import CreateOfferDto, UpdateOfferDto

logger = logging.getLogger(__name__)

DEFAULT_OFFER_COUNT = 60
MAX_OFFER_COUNT = 100
DEFAULT_PREMIUM_OFFER_COUNT = 3


def _column_values(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Map DTO field names onto Offer columns (location → latitude/longitude)."""
    values = dict(data)
    location = values.pop("location", None)
    if location is not None:
        values["latitude"] = location["latitude"]
        values["longitude"] = location["longitude"]
    return values


class OfferService:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def create(self, dto: CreateOfferDto, author_id: str) -> Offer:
        offer = Offer(author_id=author_id, **_column_values(dto.model_dump(mode="json")))
        async with session_scope(self._session_factory) as db:
            db.add(offer)
            await db.flush()
            await db.refresh(offer, attribute_names=["author"])
        logger.info("New offer created: %s (%s)", offer.title, offer.id)
        return offer

    async def find_by_id(self, offer_id: str) -> Optional[Offer]:
        async with session_scope(self._session_factory) as db:
            return await db.get(Offer, offer_id)

    async def find(self, limit: int = DEFAULT_OFFER_COUNT) -> List[Offer]:
        async with session_scope(self._session_factory) as db:
            result = await db.execute(
                select(Offer).order_by(desc(Offer.created_at)).limit(limit)
            )
            return list(result.scalars().all())

    async def update_by_id(
        self,
        offer_id: str,
        changes: Union[UpdateOfferDto, Mapping[str, Any]],
    ) -> Optional[Offer]:
        """Apply only the fields present in `changes`; None if the offer is gone."""
        if isinstance(changes, UpdateOfferDto):
            changes = changes.model_dump(mode="json", exclude_unset=True)
        values = _column_values(changes)

        async with session_scope(self._session_factory) as db:
            offer = await db.get(Offer, offer_id)
            if offer is None:
                return None
            for column, value in values.items():
                setattr(offer, column, value)
            await db.flush()
        logger.info("Offer %s updated: %s", offer_id, sorted(values))
        return offer

    async def delete_by_id(self, offer_id: str) -> Optional[Offer]:
        """Delete the offer and its favorite marks; None if the offer is gone."""
        async with session_scope(self._session_factory) as db:
            offer = await db.get(Offer, offer_id)
            if offer is None:
                return None
            await db.execute(delete(favorites).where(favorites.c.offer_id == offer_id))
            await db.delete(offer)
        logger.info("Offer %s deleted", offer_id)
        return offer

    async def find_premium_by_city(
        self, city: str, limit: int = DEFAULT_PREMIUM_OFFER_COUNT
    ) -> List[Offer]:
        async with session_scope(self._session_factory) as db:
            result = await db.execute(
                select(Offer)
                .where(Offer.city == city, Offer.is_premium.is_(True))
                .order_by(desc(Offer.created_at))
                .limit(limit)
            )
            return list(result.scalars().all())

    # ── Favorites ─────────────────────────────────────────────────────────

    async def find_favorite(self, user_id: str) -> List[Offer]:
        async with session_scope(self._session_factory) as db:
            result = await db.execute(
                select(Offer)
                .join(favorites, favorites.c.offer_id == Offer.id)
                .where(favorites.c.user_id == user_id)
                .order_by(desc(Offer.created_at))
            )
            return list(result.scalars().all())

    async def add_to_favorite(self, offer_id: str, user_id: str) -> None:
        """Mark an offer as favorite; marking it twice is a no-op."""
        async with session_scope(self._session_factory) as db:
            existing = await db.execute(
                select(favorites.c.offer_id).where(
                    favorites.c.offer_id == offer_id, favorites.c.user_id == user_id
                )
            )
            if existing.first() is not None:
                return
            await db.execute(insert(favorites).values(offer_id=offer_id, user_id=user_id))
        logger.info("Offer %s added to favorites of %s", offer_id, user_id)

    async def delete_from_favorite(self, offer_id: str, user_id: str) -> None:
        async with session_scope(self._session_factory) as db:
            await db.execute(
                delete(favorites).where(
                    favorites.c.offer_id == offer_id, favorites.c.user_id == user_id
                )
            )
        logger.info("Offer %s removed from favorites of %s", offer_id, user_id)

    # ── Rating ────────────────────────────────────────────────────────────

    async def update_rating(self, offer_id: str) -> None:
        """Recompute the average comment rating and the comment count."""
        async with session_scope(self._session_factory) as db:
            stats = await db.execute(
                select(func.avg(Comment.rating), func.count(Comment.id)).where(
                    Comment.offer_id == offer_id
                )
            )
            average, count = stats.one()
            rating = round(float(average or 0), 1)
            await db.execute(
                update(Offer)
                .where(Offer.id == offer_id)
                .values(rating=rating, comment_count=count)
            )
        logger.debug("Offer %s rating=%s comments=%d", offer_id, rating, count)

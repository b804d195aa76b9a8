"""
Six Cities Backend — Comment Service
======================================

What:  Persistence operations for offer comments.
Who:   CommentController (list, create) and OfferController (delete with offer).
"""

import logging
from typing import List

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import async_sessionmaker

from sixcities.database import session_scope
from sixcities.models.comment import Comment
from sixcities.schemas.comment import CreateCommentDto

logger = logging.getLogger(__name__)

MAX_COMMENT_COUNT = 50


class CommentService:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def create(self, dto: CreateCommentDto, offer_id: str, author_id: str) -> Comment:
        comment = Comment(text=dto.text, rating=dto.rating, offer_id=offer_id, author_id=author_id)
        async with session_scope(self._session_factory) as db:
            db.add(comment)
            await db.flush()
            await db.refresh(comment, attribute_names=["author"])
        logger.info("New comment %s on offer %s", comment.id, offer_id)
        return comment

    async def find_by_offer_id(
        self, offer_id: str, limit: int = MAX_COMMENT_COUNT
    ) -> List[Comment]:
        """Newest comments first."""
        async with session_scope(self._session_factory) as db:
            result = await db.execute(
                select(Comment)
                .where(Comment.offer_id == offer_id)
                .order_by(desc(Comment.created_at))
                .limit(limit)
            )
            return list(result.scalars().all())

    async def delete_by_offer_id(self, offer_id: str) -> int:
        async with session_scope(self._session_factory) as db:
            result = await db.execute(delete(Comment).where(Comment.offer_id == offer_id))
        logger.info("Deleted %d comments of offer %s", result.rowcount, offer_id)
        return result.rowcount

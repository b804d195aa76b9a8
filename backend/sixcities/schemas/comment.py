"""
Six Cities Backend — Comment DTOs and RDOs
============================================
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from sixcities.schemas.common import DtoModel, RdoModel
from sixcities.schemas.user import UserRdo


class CreateCommentDto(DtoModel):
    text: str = Field(min_length=5, max_length=1024)
    rating: int = Field(ge=1, le=5)


class CommentRdo(RdoModel):
    id: str
    text: str
    rating: int
    created_at: datetime
    author: Optional[UserRdo] = None

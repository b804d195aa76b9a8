"""
Six Cities Backend — User DTOs and RDOs
=========================================

What:  Registration / login request shapes and the public user representation.
Who:   UserController (ValidateBody shapes, response bodies), OfferRdo and
       CommentRdo (embedded author).
"""

from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field

from sixcities.schemas.common import DtoModel, RdoModel


class UserType(str, Enum):
    ORDINARY = "ordinary"
    PRO = "pro"


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateUserDto(DtoModel):
    name: str = Field(min_length=1, max_length=15)
    email: EmailStr
    avatar: Optional[str] = Field(default=None, max_length=255)
    password: str = Field(min_length=6, max_length=12)
    type: UserType = UserType.ORDINARY


class LoginUserDto(DtoModel):
    email: EmailStr
    password: str = Field(min_length=1)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserRdo(RdoModel):
    """Public user fields; the password hash is never part of a response."""

    id: str
    name: str
    email: str
    avatar: Optional[str] = None
    type: str


class LoggedUserRdo(UserRdo):
    """Returned by POST /users/login: the user plus a bearer token."""

    token: str


class UploadUserAvatarRdo(RdoModel):
    filepath: str

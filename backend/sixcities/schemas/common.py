"""
Six Cities Backend — Shared Schema Bases
==========================================

What:  Base classes for request DTOs and response RDOs, the RDO filler, and
       the error/health response models.
How:   DTOs trim strings and accept both camelCase and snake_case keys.
       RDOs read ORM objects (from_attributes) and serialize in camelCase,
       exposing only the fields they declare.
"""

from datetime import datetime
from typing import Any, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RdoT = TypeVar("RdoT", bound="RdoModel")


# ══════════════════════════════════════════════════════════════════════════
# Bases
# ══════════════════════════════════════════════════════════════════════════


class DtoModel(BaseModel):
    """Base for request bodies validated by the ValidateBody middleware."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class RdoModel(BaseModel):
    """Base for response bodies; unknown ORM attributes are never exposed."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def fill_rdo(
    rdo_cls: Type[RdoT],
    data: Any,
    **overrides: Any,
) -> Union[RdoT, List[RdoT]]:
    """
    Shape an ORM object (or a list of them, or a plain dict) into an RDO.

    `overrides` are applied on top of the source attributes, e.g.
    `fill_rdo(OfferRdo, offers, is_favorite=True)`.
    """
    if isinstance(data, (list, tuple)):
        return [fill_rdo(rdo_cls, item, **overrides) for item in data]
    rdo = rdo_cls.model_validate(data)
    if overrides:
        rdo = rdo.model_copy(update=overrides)
    return rdo


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models: one error format across all endpoints
# ══════════════════════════════════════════════════════════════════════════


class ErrorDetail(BaseModel):
    field: str = Field(description="Request field that failed")
    message: str = Field(description="Why it failed")


class ErrorResponse(RdoModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "errorType": "not_found",
            "message": "Offer with 65a1f0c2b4d5e6f7a8b9c0d1 not found."
        }
    """

    error_type: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[List[ErrorDetail]] = Field(
        default=None, description="Field-level violations (validation errors only)"
    )


class HealthResponse(RdoModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
    checked_at: Optional[datetime] = Field(default=None, description="Probe time (UTC)")

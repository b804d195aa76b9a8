"""
Six Cities Backend — Route Middlewares
========================================

What:  The five per-route checks that run, in declared order, before a handler.
How:   Each variant is an immutable record configured once at route
       registration. `execute(context)` either returns an Outcome or raises an
       HttpError; the chain stops at the first raise.

Variants:
    ValidateBody(shape)                          body → DTO, else 400 + details
    ValidateIdentifier(param_name)               24-hex id, else 400
    ResourceExists(lookup, resource, param_name) document present, else 404
    RequireAuthentication(verifier)              bearer token → principal, else 401
    UploadFile(target_directory, field, store)   multipart file stored, else 400
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile as StarletteUploadFile

from sixcities.database import IDENTIFIER_LENGTH
from sixcities.exceptions import (
    BadIdentifierError,
    FieldViolation,
    NotFoundError,
    UnauthorizedError,
    UploadFailureError,
    ValidationError,
)
from sixcities.rest.context import RequestContext
from sixcities.rest.types import DocumentLookup, TokenVerifier, UploadStore

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(rf"^[0-9a-fA-F]{{{IDENTIFIER_LENGTH}}}$")
BEARER_SCHEME = "bearer"


class Outcome(str, Enum):
    CONTINUE = "continue"
    TERMINATED = "terminated"


def _field_path(location: Tuple) -> str:
    # Pydantic locations are tuples like ("location", "latitude") or ("images", 2)
    return ".".join(str(part) for part in location) or "body"


# ══════════════════════════════════════════════════════════════════════════
# Variants
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ValidateBody:
    """Replace the raw body with an instance of `shape`, reporting every violation."""

    shape: Type[BaseModel]

    async def execute(self, context: RequestContext) -> Outcome:
        raw = context.body if context.body is not None else {}
        try:
            context.body = self.shape.model_validate(raw)
        except PydanticValidationError as e:
            violations = [
                FieldViolation(field=_field_path(error["loc"]), message=error["msg"])
                for error in e.errors()
            ]
            raise ValidationError(
                message=f"Validation failed for {len(violations)} field(s)",
                source="ValidateBody",
                details=violations,
                context={"shape": self.shape.__name__},
            )
        return Outcome.CONTINUE


@dataclass(frozen=True)
class ValidateIdentifier:
    param_name: str

    async def execute(self, context: RequestContext) -> Outcome:
        value = context.params.get(self.param_name, "")
        if not IDENTIFIER_PATTERN.fullmatch(value):
            raise BadIdentifierError(self.param_name, value, source="ValidateIdentifier")
        return Outcome.CONTINUE


@dataclass(frozen=True)
class ResourceExists:
    """
    Fetch the document named by a path parameter and keep it on the context.

    Must be declared after ValidateIdentifier for the same parameter so the
    lookup never sees a malformed id.
    """

    lookup: DocumentLookup
    resource_name: str
    param_name: str

    async def execute(self, context: RequestContext) -> Outcome:
        document_id = context.params.get(self.param_name, "")
        document = await self.lookup.find_by_id(document_id)
        if document is None:
            raise NotFoundError(self.resource_name, document_id, source="ResourceExists")
        context.documents[self.param_name] = document
        return Outcome.CONTINUE


@dataclass(frozen=True)
class RequireAuthentication:
    verifier: TokenVerifier

    async def execute(self, context: RequestContext) -> Outcome:
        header = context.request.headers.get("authorization")
        if not header:
            raise UnauthorizedError(source="RequireAuthentication")

        scheme, _, token = header.partition(" ")
        token = token.strip()
        if scheme.lower() != BEARER_SCHEME or not token:
            raise UnauthorizedError("Invalid token", source="RequireAuthentication")

        context.principal = await self.verifier.verify(token)
        return Outcome.CONTINUE


@dataclass(frozen=True)
class UploadFile:
    """Store the multipart file sent under `field_name` into `target_directory`."""

    target_directory: str
    field_name: str
    store: UploadStore

    async def execute(self, context: RequestContext) -> Outcome:
        form = await context.request.form()
        upload = form.get(self.field_name)
        if not isinstance(upload, StarletteUploadFile):
            raise UploadFailureError(field=self.field_name, source="UploadFile")

        context.file = await self.store.save(
            upload, self.target_directory, field_name=self.field_name
        )
        logger.info(
            "Stored upload '%s' as %s (%d bytes)",
            context.file.original_name,
            context.file.filename,
            context.file.size,
        )
        return Outcome.CONTINUE


Middleware = Union[
    ValidateBody,
    ValidateIdentifier,
    ResourceExists,
    RequireAuthentication,
    UploadFile,
]

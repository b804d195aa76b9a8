"""
Six Cities Backend — Pipeline Collaborator Contracts
======================================================

What:  The narrow interfaces the request pipeline consumes from the service
       layer, plus the two value objects middlewares attach to a request.
Why:   Middlewares are built once at startup with these capabilities injected;
       they never import a concrete service.

Contracts:
    DocumentLookup  find_by_id(id) -> document | None   (ResourceExists)
    TokenVerifier   verify(token) -> TokenPayload        (RequireAuthentication)
    UploadStore     save(upload, directory) -> StoredFile (UploadFile)
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from starlette.datastructures import UploadFile as StarletteUploadFile


@dataclass(frozen=True)
class TokenPayload:
    """The authenticated principal carried by a bearer token."""

    id: str
    email: str
    name: str


@dataclass(frozen=True)
class StoredFile:
    """Descriptor of an upload persisted under the upload directory."""

    filename: str
    path: str
    original_name: str
    content_type: Optional[str]
    size: int


class DocumentLookup(Protocol):
    async def find_by_id(self, document_id: str) -> Optional[Any]: ...


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> TokenPayload: ...


class UploadStore(Protocol):
    async def save(
        self,
        upload: StarletteUploadFile,
        target_directory: str,
        field_name: str = "file",
    ) -> StoredFile: ...

"""
Six Cities Backend — Request Context
======================================

What:  The per-request state that flows through the middleware chain and into
       the handler.
How:   Built from the Starlette request before the chain runs. Middlewares
       enrich it (validated body, principal, stored file, looked-up
       documents); the handler reads from it.

Lifecycle (enforced by `advance`):
    PENDING → MIDDLEWARE_RUNNING → HANDLER_RUNNING → RESPONSE_SENT
                      │                   │
                      └──── ERROR_MAPPED ─┴──→ RESPONSE_SENT
    A middleware may also answer directly: MIDDLEWARE_RUNNING → RESPONSE_SENT.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from starlette.requests import Request
from starlette.responses import Response

from sixcities.exceptions import UnauthorizedError, ValidationError
from sixcities.rest.types import StoredFile, TokenPayload


class PipelineStage(str, Enum):
    PENDING = "pending"
    MIDDLEWARE_RUNNING = "middleware_running"
    HANDLER_RUNNING = "handler_running"
    ERROR_MAPPED = "error_mapped"
    RESPONSE_SENT = "response_sent"


_TRANSITIONS: Dict[PipelineStage, FrozenSet[PipelineStage]] = {
    PipelineStage.PENDING: frozenset(
        {PipelineStage.MIDDLEWARE_RUNNING, PipelineStage.ERROR_MAPPED}
    ),
    PipelineStage.MIDDLEWARE_RUNNING: frozenset(
        {
            PipelineStage.HANDLER_RUNNING,
            PipelineStage.RESPONSE_SENT,
            PipelineStage.ERROR_MAPPED,
        }
    ),
    PipelineStage.HANDLER_RUNNING: frozenset(
        {PipelineStage.RESPONSE_SENT, PipelineStage.ERROR_MAPPED}
    ),
    PipelineStage.ERROR_MAPPED: frozenset({PipelineStage.RESPONSE_SENT}),
    PipelineStage.RESPONSE_SENT: frozenset(),
}


class PipelineStateError(RuntimeError):
    """A request attempted an illegal lifecycle transition."""


@dataclass
class RequestContext:
    """
    Mutable request state shared by middlewares and the handler.

    Attributes:
        request:    The underlying Starlette request (headers, form data)
        params:     Path parameters, always strings
        query:      Query string parameters, always strings
        body:       Raw JSON body; replaced by the DTO after ValidateBody
        principal:  Set only by RequireAuthentication on success
        file:       Set only by UploadFile on success
        documents:  Resources fetched by ResourceExists, keyed by path param
        response:   Set by a middleware that answers the request itself
        stage:      Current lifecycle stage
    """

    request: Request
    params: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    principal: Optional[TokenPayload] = None
    file: Optional[StoredFile] = None
    documents: Dict[str, Any] = field(default_factory=dict)
    response: Optional[Response] = None
    stage: PipelineStage = PipelineStage.PENDING

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        return cls(
            request=request,
            params={key: str(value) for key, value in request.path_params.items()},
            query=dict(request.query_params),
        )

    async def load_body(self) -> None:
        """Parse a JSON body; other content types are left to their middlewares."""
        content_type = self.request.headers.get("content-type", "")
        if not content_type.startswith("application/json"):
            return
        raw = await self.request.body()
        if not raw:
            return
        try:
            self.body = json.loads(raw)
        except ValueError as e:
            raise ValidationError(
                message="Malformed JSON body",
                field="body",
                source="RequestContext",
                context={"error": str(e)},
            )

    def advance(self, stage: PipelineStage) -> None:
        if stage not in _TRANSITIONS[self.stage]:
            raise PipelineStateError(
                f"Illegal pipeline transition {self.stage.value} → {stage.value}"
            )
        self.stage = stage

    def require_principal(self) -> TokenPayload:
        if self.principal is None:
            raise UnauthorizedError(source="RequestContext")
        return self.principal

    def document(self, param_name: str) -> Any:
        return self.documents[param_name]

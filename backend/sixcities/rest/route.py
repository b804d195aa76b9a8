"""
Six Cities Backend — Route Descriptors
========================================

What:  The immutable record a controller registers for each endpoint.
How:   A descriptor is plain data: path (relative to the controller prefix,
       FastAPI `{param}` syntax), verb, handler and the ordered middleware
       tuple. The application root turns descriptors into FastAPI routes.

Example:
    RouteDescriptor(
        path="/{offer_id}",
        method=HttpMethod.GET,
        handler=self.get_offer,
        middlewares=(
            ValidateIdentifier("offer_id"),
            ResourceExists(self.offer_service, "Offer", "offer_id"),
        ),
    )
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable, Sequence, Tuple

from starlette.responses import Response

if TYPE_CHECKING:
    from sixcities.rest.context import RequestContext
    from sixcities.rest.middlewares import Middleware


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


RequestHandler = Callable[["RequestContext"], Awaitable[Response]]


class RouteRegistrationError(ValueError):
    """A controller tried to register the same (path, method) pair twice."""


@dataclass(frozen=True)
class RouteDescriptor:
    path: str
    method: HttpMethod
    handler: RequestHandler
    middlewares: Sequence["Middleware"] = ()

    def __post_init__(self) -> None:
        # Freeze the chain: a list passed by the caller must not change later
        object.__setattr__(self, "middlewares", tuple(self.middlewares))
        object.__setattr__(self, "method", HttpMethod(self.method))

    @property
    def key(self) -> Tuple[str, HttpMethod]:
        return self.path, self.method

"""
Six Cities Backend — Base Controller
======================================

What:  Owns a controller's route list, the response helpers every handler uses,
       and the per-request pipeline boundary.
How:   Subclasses call `add_route` from `__init__`. For each request the
       application root calls `handle(route, request)`, which builds the
       RequestContext, runs the middleware chain, invokes the handler and maps
       any failure to an error response.

Response helpers:
    ok(body)          → 200 + JSON
    created(body)     → 201 + JSON
    no_content(body)  → 204, empty body (the argument is ignored)
"""

import logging
from typing import Any, Awaitable, Callable, List, Set, Tuple

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.requests import Request
from starlette.responses import Response

from sixcities.rest.chain import run_chain
from sixcities.rest.context import PipelineStage, RequestContext
from sixcities.rest.error_mapper import map_exception
from sixcities.rest.middlewares import Outcome
from sixcities.rest.route import HttpMethod, RouteDescriptor, RouteRegistrationError

logger = logging.getLogger(__name__)

Endpoint = Callable[[Request], Awaitable[Response]]


class BaseController:
    """
    Base class for resource controllers.

    Attributes:
        prefix: Path prefix shared by every route of the controller ("/offers")
        tag:    OpenAPI tag for the generated routes
    """

    tag: str = "default"

    def __init__(self, prefix: str):
        self.prefix = prefix.rstrip("/")
        self._routes: List[RouteDescriptor] = []
        self._keys: Set[Tuple[str, HttpMethod]] = set()

    # ── Registration ──────────────────────────────────────────────────────

    def add_route(self, route: RouteDescriptor) -> None:
        if route.key in self._keys:
            raise RouteRegistrationError(
                f"{type(self).__name__}: {route.method.value} "
                f"{self.prefix}{route.path} is already registered"
            )
        self._keys.add(route.key)
        self._routes.append(route)
        logger.debug("Route registered: %s %s%s", route.method.value, self.prefix, route.path)

    def get_routes(self) -> Tuple[RouteDescriptor, ...]:
        return tuple(self._routes)

    # ── Response helpers ──────────────────────────────────────────────────

    def ok(self, body: Any) -> Response:
        return self._send(200, body)

    def created(self, body: Any) -> Response:
        return self._send(201, body)

    def no_content(self, body: Any = None) -> Response:
        return Response(status_code=204)

    def _send(self, status_code: int, body: Any) -> Response:
        return JSONResponse(status_code=status_code, content=jsonable_encoder(body))

    # ── Pipeline boundary ─────────────────────────────────────────────────

    async def handle(self, route: RouteDescriptor, request: Request) -> Response:
        """Run one request through the route's chain and handler."""
        context = RequestContext.from_request(request)
        try:
            await context.load_body()
            context.advance(PipelineStage.MIDDLEWARE_RUNNING)
            outcome = await run_chain(route.middlewares, context)

            if outcome is Outcome.TERMINATED:
                if context.response is None:
                    raise RuntimeError(
                        f"Middleware chain of {route.method.value} {self.prefix}{route.path} "
                        "terminated without a response"
                    )
                response = context.response
            else:
                context.advance(PipelineStage.HANDLER_RUNNING)
                response = await route.handler(context)
        except Exception as e:
            context.advance(PipelineStage.ERROR_MAPPED)
            response = map_exception(e)

        context.advance(PipelineStage.RESPONSE_SENT)
        return response

    def endpoint_for(self, route: RouteDescriptor) -> Endpoint:
        async def endpoint(request: Request) -> Response:
            return await self.handle(route, request)

        endpoint.__name__ = getattr(route.handler, "__name__", "endpoint")
        return endpoint

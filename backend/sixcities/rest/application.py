"""
Six Cities Backend — Application Root
=======================================

What:  Aggregates every controller's routes and mounts them on the FastAPI app.
How:   Each RouteDescriptor becomes one FastAPI route at prefix + path. Routes
       are added in controller order, then in each controller's registration
       order, so literal paths registered first win over `{param}` paths.
"""

import logging
from typing import List, Sequence, Set, Tuple

from fastapi import APIRouter, FastAPI

from sixcities.rest.controller import BaseController
from sixcities.rest.route import HttpMethod, RouteRegistrationError

logger = logging.getLogger(__name__)


class RestApplication:
    def __init__(self, controllers: Sequence[BaseController]):
        self.controllers: List[BaseController] = list(controllers)

    def build_router(self) -> APIRouter:
        router = APIRouter()
        seen: Set[Tuple[str, HttpMethod]] = set()

        for controller in self.controllers:
            for route in controller.get_routes():
                full_path = f"{controller.prefix}{route.path}" or "/"
                key = (full_path, route.method)
                if key in seen:
                    raise RouteRegistrationError(
                        f"{route.method.value} {full_path} is registered by more than one controller"
                    )
                seen.add(key)
                router.add_api_route(
                    full_path,
                    controller.endpoint_for(route),
                    methods=[route.method.value],
                    tags=[controller.tag],
                    response_model=None,
                    name=f"{type(controller).__name__}.{getattr(route.handler, '__name__', 'handler')}",
                )
        return router

    def mount(self, app: FastAPI) -> None:
        router = self.build_router()
        app.include_router(router)
        logger.info(
            "Mounted %d routes from %d controllers", len(router.routes), len(self.controllers)
        )

"""
Six Cities Backend — Request Pipeline
=======================================

Route descriptors, the five route middlewares, the chain executor, the base
controller and the error mapper. Controllers depend on this package; it never
depends on a concrete controller or service.
"""

from sixcities.rest.application import RestApplication
from sixcities.rest.chain import run_chain
from sixcities.rest.context import PipelineStage, RequestContext
from sixcities.rest.controller import BaseController
from sixcities.rest.error_mapper import map_exception, register_exception_handlers
from sixcities.rest.middlewares import (
    Middleware,
    Outcome,
    RequireAuthentication,
    ResourceExists,
    UploadFile,
    ValidateBody,
    ValidateIdentifier,
)
from sixcities.rest.route import HttpMethod, RouteDescriptor, RouteRegistrationError
from sixcities.rest.types import StoredFile, TokenPayload

__all__ = [
    "BaseController",
    "HttpMethod",
    "Middleware",
    "Outcome",
    "PipelineStage",
    "RequestContext",
    "RequireAuthentication",
    "ResourceExists",
    "RestApplication",
    "RouteDescriptor",
    "RouteRegistrationError",
    "StoredFile",
    "TokenPayload",
    "UploadFile",
    "ValidateBody",
    "ValidateIdentifier",
    "map_exception",
    "register_exception_handlers",
]

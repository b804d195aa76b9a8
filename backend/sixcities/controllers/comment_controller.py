"""
Six Cities Backend — Comment Controller
=========================================

Routes (prefix /comments):

    GET  /comments/{offer_id}   comments of an offer, newest first
    POST /comments/{offer_id}   [auth] add a comment; refreshes the offer rating
"""

import logging

from starlette.responses import Response

from sixcities.rest.context import RequestContext
from sixcities.rest.controller import BaseController
from sixcities.rest.middlewares import (
    RequireAuthentication,
    ResourceExists,
    ValidateBody,
    ValidateIdentifier,
)
from sixcities.rest.route import HttpMethod, RouteDescriptor
from sixcities.schemas.comment import CommentRdo, CreateCommentDto
from sixcities.schemas.common import fill_rdo
from sixcities.services.auth_service import AuthService
from sixcities.services.comment_service import CommentService
from sixcities.services.offer_service import OfferService

logger = logging.getLogger(__name__)


class CommentController(BaseController):
    tag = "comments"

    def __init__(
        self,
        comment_service: CommentService,
        offer_service: OfferService,
        auth_service: AuthService,
    ):
        super().__init__("/comments")
        self.comment_service = comment_service
        self.offer_service = offer_service

        logger.info("Register routes for CommentController")

        valid_id = ValidateIdentifier("offer_id")
        offer_exists = ResourceExists(offer_service, "Offer", "offer_id")

        self.add_route(
            RouteDescriptor("/{offer_id}", HttpMethod.GET, self.index, (valid_id, offer_exists))
        )
        self.add_route(
            RouteDescriptor(
                "/{offer_id}",
                HttpMethod.POST,
                self.create,
                (
                    RequireAuthentication(auth_service),
                    valid_id,
                    ValidateBody(CreateCommentDto),
                    offer_exists,
                ),
            )
        )

    async def index(self, context: RequestContext) -> Response:
        comments = await self.comment_service.find_by_offer_id(context.params["offer_id"])
        return self.ok(fill_rdo(CommentRdo, comments))

    async def create(self, context: RequestContext) -> Response:
        offer_id = context.params["offer_id"]
        comment = await self.comment_service.create(
            context.body, offer_id, context.require_principal().id
        )
        await self.offer_service.update_rating(offer_id)
        return self.created(fill_rdo(CommentRdo, comment))

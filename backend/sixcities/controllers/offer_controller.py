"""
Six Cities Backend — Offer Controller
=======================================

Routes (prefix /offers; literal paths are registered before `{offer_id}`):

    GET    /offers/premium/{city}          premium offers of a city
    GET    /offers/favorite                [auth] the caller's favorites
    POST   /offers/favorite/{offer_id}     [auth] mark as favorite
    DELETE /offers/favorite/{offer_id}     [auth] unmark
    GET    /offers                         latest offers (?limit=1..100)
    POST   /offers                         [auth] create
    GET    /offers/{offer_id}              one offer
    PATCH  /offers/{offer_id}              [auth, owner] partial update
    DELETE /offers/{offer_id}              [auth, owner] delete with comments
    POST   /offers/{offer_id}/image        [auth, owner] upload preview image

Ownership: touching another user's offer answers 404, the same as for an
offer that does not exist.
"""

import logging
from typing import Optional

from starlette.responses import Response

from sixcities.exceptions import NotFoundError, ValidationError
from sixcities.models.offer import Offer
from sixcities.rest.context import RequestContext
from sixcities.rest.controller import BaseController
from sixcities.rest.middlewares import (
    RequireAuthentication,
    ResourceExists,
    UploadFile,
    ValidateBody,
    ValidateIdentifier,
)
from sixcities.rest.route import HttpMethod, RouteDescriptor
from sixcities.schemas.common import fill_rdo
from sixcities.schemas.offer import CreateOfferDto, OfferRdo, UpdateOfferDto, UploadImageRdo
from sixcities.services.auth_service import AuthService
from sixcities.services.comment_service import CommentService
from sixcities.services.file_store import FileStore
from sixcities.services.offer_service import (
    DEFAULT_OFFER_COUNT,
    MAX_OFFER_COUNT,
    OfferService,
)

logger = logging.getLogger(__name__)

OFFER_ID = "offer_id"


def parse_limit(raw: Optional[str]) -> int:
    if raw is None or raw == "":
        return DEFAULT_OFFER_COUNT
    try:
        limit = int(raw)
    except ValueError:
        raise ValidationError("limit must be an integer", field="limit", source="OfferController")
    if not 1 <= limit <= MAX_OFFER_COUNT:
        raise ValidationError(
            f"limit must be between 1 and {MAX_OFFER_COUNT}",
            field="limit",
            source="OfferController",
        )
    return limit


class OfferController(BaseController):
    tag = "offers"

    def __init__(
        self,
        offer_service: OfferService,
        comment_service: CommentService,
        auth_service: AuthService,
        file_store: FileStore,
        upload_directory: str,
    ):
        super().__init__("/offers")
        self.offer_service = offer_service
        self.comment_service = comment_service
        self.file_store = file_store

        logger.info("Register routes for OfferController")

        authenticated = RequireAuthentication(auth_service)
        valid_id = ValidateIdentifier(OFFER_ID)
        offer_exists = ResourceExists(offer_service, "Offer", OFFER_ID)

        self.add_route(RouteDescriptor("/premium/{city}", HttpMethod.GET, self.get_premium))
        self.add_route(
            RouteDescriptor("/favorite", HttpMethod.GET, self.get_favorite, (authenticated,))
        )
        self.add_route(
            RouteDescriptor(
                "/favorite/{offer_id}",
                HttpMethod.POST,
                self.add_favorite,
                (authenticated, valid_id, offer_exists),
            )
        )
        self.add_route(
            RouteDescriptor(
                "/favorite/{offer_id}",
                HttpMethod.DELETE,
                self.delete_favorite,
                (authenticated, valid_id, offer_exists),
            )
        )
        self.add_route(RouteDescriptor("", HttpMethod.GET, self.index))
        self.add_route(
            RouteDescriptor(
                "",
                HttpMethod.POST,
                self.create,
                (authenticated, ValidateBody(CreateOfferDto)),
            )
        )
        self.add_route(
            RouteDescriptor(
                "/{offer_id}", HttpMethod.GET, self.show, (valid_id, offer_exists)
            )
        )
        self.add_route(
            RouteDescriptor(
                "/{offer_id}",
                HttpMethod.PATCH,
                self.update,
                (authenticated, ValidateBody(UpdateOfferDto), valid_id, offer_exists),
            )
        )
        self.add_route(
            RouteDescriptor(
                "/{offer_id}",
                HttpMethod.DELETE,
                self.delete,
                (authenticated, valid_id, offer_exists),
            )
        )
        self.add_route(
            RouteDescriptor(
                "/{offer_id}/image",
                HttpMethod.POST,
                self.upload_image,
                (
                    authenticated,
                    valid_id,
                    UploadFile(upload_directory, "image", file_store),
                ),
            )
        )

    def _owned_offer(self, context: RequestContext) -> Offer:
        offer = context.document(OFFER_ID)
        if offer.author_id != context.require_principal().id:
            raise NotFoundError("Offer", offer.id, source="OfferController")
        return offer

    # ── Handlers ──────────────────────────────────────────────────────────

    async def index(self, context: RequestContext) -> Response:
        offers = await self.offer_service.find(parse_limit(context.query.get("limit")))
        return self.ok(fill_rdo(OfferRdo, offers))

    async def create(self, context: RequestContext) -> Response:
        offer = await self.offer_service.create(
            context.body, author_id=context.require_principal().id
        )
        return self.created(fill_rdo(OfferRdo, offer))

    async def show(self, context: RequestContext) -> Response:
        return self.ok(fill_rdo(OfferRdo, context.document(OFFER_ID)))

    async def update(self, context: RequestContext) -> Response:
        offer = self._owned_offer(context)
        updated = await self.offer_service.update_by_id(offer.id, context.body)
        if updated is None:
            raise NotFoundError("Offer", offer.id, source="OfferController")
        return self.ok(fill_rdo(OfferRdo, updated))

    async def delete(self, context: RequestContext) -> Response:
        offer = self._owned_offer(context)
        await self.offer_service.delete_by_id(offer.id)
        await self.comment_service.delete_by_offer_id(offer.id)
        return self.no_content(offer)

    async def get_premium(self, context: RequestContext) -> Response:
        offers = await self.offer_service.find_premium_by_city(context.params["city"])
        return self.ok(fill_rdo(OfferRdo, offers))

    async def get_favorite(self, context: RequestContext) -> Response:
        offers = await self.offer_service.find_favorite(context.require_principal().id)
        return self.ok(fill_rdo(OfferRdo, offers, is_favorite=True))

    async def add_favorite(self, context: RequestContext) -> Response:
        await self.offer_service.add_to_favorite(
            context.params[OFFER_ID], context.require_principal().id
        )
        return self.ok({})

    async def delete_favorite(self, context: RequestContext) -> Response:
        await self.offer_service.delete_from_favorite(
            context.params[OFFER_ID], context.require_principal().id
        )
        return self.ok({})

    async def upload_image(self, context: RequestContext) -> Response:
        offer_id = context.params[OFFER_ID]
        stored = context.file
        offer = await self.offer_service.find_by_id(offer_id)
        if offer is None or offer.author_id != context.require_principal().id:
            await self.file_store.cleanup(stored.path)
            raise NotFoundError("Offer", offer_id, source="OfferController")

        try:
            await self.offer_service.update_by_id(offer_id, {"preview_image": stored.filename})
        except Exception:
            await self.file_store.cleanup(stored.path)
            raise
        return self.created(UploadImageRdo(preview_image=stored.filename))

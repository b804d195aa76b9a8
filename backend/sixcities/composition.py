"""
Six Cities Backend — Composition Root
=======================================

What:  Builds the service graph and the controllers once at startup.
Why:   Every collaborator is passed explicitly; there is no container and no
       lookup by name. Tests swap in fakes by passing their own `Services`.

Dependency graph:
    session_factory ─┬─ UserService ── AuthService (TokenVerifier)
                     ├─ OfferService   (DocumentLookup for offers)
                     └─ CommentService
    FileStore        (UploadStore, no database)

    OfferController(offer, comment, auth, file_store, upload_dir)
    UserController(user, auth, file_store, upload_dir)
    CommentController(comment, offer, auth)
"""

import logging
from dataclasses import dataclass
from typing import List

from sqlalchemy.ext.asyncio import async_sessionmaker

from sixcities.config import Settings
from sixcities.controllers import CommentController, OfferController, UserController
from sixcities.rest.controller import BaseController
from sixcities.services.auth_service import AuthService
from sixcities.services.comment_service import CommentService
from sixcities.services.file_store import FileStore
from sixcities.services.offer_service import OfferService
from sixcities.services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    user_service: UserService
    offer_service: OfferService
    comment_service: CommentService
    auth_service: AuthService
    file_store: FileStore


def build_services(app_settings: Settings, session_factory: async_sessionmaker) -> Services:
    user_service = UserService(session_factory)
    return Services(
        user_service=user_service,
        offer_service=OfferService(session_factory),
        comment_service=CommentService(session_factory),
        auth_service=AuthService(
            user_service,
            secret=app_settings.jwt_secret,
            algorithm=app_settings.jwt_algorithm,
            expiration_seconds=app_settings.jwt_expiration_seconds,
        ),
        file_store=FileStore(max_file_size=app_settings.max_file_size),
    )


def build_controllers(services: Services, app_settings: Settings) -> List[BaseController]:
    """Controllers in mount order."""
    upload_directory = app_settings.upload_directory
    return [
        OfferController(
            services.offer_service,
            services.comment_service,
            services.auth_service,
            services.file_store,
            upload_directory,
        ),
        UserController(
            services.user_service,
            services.auth_service,
            services.file_store,
            upload_directory,
        ),
        CommentController(
            services.comment_service,
            services.offer_service,
            services.auth_service,
        ),
    ]

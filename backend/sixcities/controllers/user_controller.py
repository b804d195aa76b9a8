"""
Six Cities Backend — User Controller
======================================

Routes (prefix /users):

    POST /users/register   create an account (409 if the e-mail is taken)
    POST /users/login      exchange credentials for a bearer token
    GET  /users/login      [auth] the user behind the token
    POST /users/avatar     [auth] upload an avatar image
"""

import logging

from starlette.responses import Response

from sixcities.config import STATIC_UPLOAD_ROUTE
from sixcities.exceptions import ConflictError, UnauthorizedError
from sixcities.rest.context import RequestContext
from sixcities.rest.controller import BaseController
from sixcities.rest.middlewares import RequireAuthentication, UploadFile, ValidateBody
from sixcities.rest.route import HttpMethod, RouteDescriptor
from sixcities.schemas.common import fill_rdo
from sixcities.schemas.user import (
    CreateUserDto,
    LoggedUserRdo,
    LoginUserDto,
    UploadUserAvatarRdo,
    UserRdo,
)
from sixcities.services.auth_service import AuthService
from sixcities.services.file_store import FileStore
from sixcities.services.user_service import UserService

logger = logging.getLogger(__name__)


class UserController(BaseController):
    tag = "users"

    def __init__(
        self,
        user_service: UserService,
        auth_service: AuthService,
        file_store: FileStore,
        upload_directory: str,
    ):
        super().__init__("/users")
        self.user_service = user_service
        self.auth_service = auth_service
        self.file_store = file_store

        logger.info("Register routes for UserController")

        authenticated = RequireAuthentication(auth_service)

        self.add_route(
            RouteDescriptor(
                "/register", HttpMethod.POST, self.register, (ValidateBody(CreateUserDto),)
            )
        )
        self.add_route(
            RouteDescriptor("/login", HttpMethod.POST, self.login, (ValidateBody(LoginUserDto),))
        )
        self.add_route(
            RouteDescriptor("/login", HttpMethod.GET, self.check_authenticate, (authenticated,))
        )
        self.add_route(
            RouteDescriptor(
                "/avatar",
                HttpMethod.POST,
                self.upload_avatar,
                (authenticated, UploadFile(upload_directory, "avatar", file_store)),
            )
        )

    async def register(self, context: RequestContext) -> Response:
        dto: CreateUserDto = context.body
        if await self.user_service.find_by_email(dto.email) is not None:
            raise ConflictError(
                f"User with email «{dto.email}» exists.", source="UserController"
            )
        user = await self.user_service.create(dto)
        return self.created(fill_rdo(UserRdo, user))

    async def login(self, context: RequestContext) -> Response:
        user = await self.auth_service.verify_credentials(context.body)
        token = self.auth_service.authenticate(user)
        logged = LoggedUserRdo(token=token, **fill_rdo(UserRdo, user).model_dump())
        return self.ok(logged)

    async def check_authenticate(self, context: RequestContext) -> Response:
        principal = context.require_principal()
        user = await self.user_service.find_by_email(principal.email)
        if user is None:
            raise UnauthorizedError(source="UserController")
        return self.ok(fill_rdo(UserRdo, user))

    async def upload_avatar(self, context: RequestContext) -> Response:
        stored = context.file
        user = await self.user_service.update_avatar(
            context.require_principal().id, stored.filename
        )
        if user is None:
            await self.file_store.cleanup(stored.path)
            raise UnauthorizedError(source="UserController")
        return self.created(UploadUserAvatarRdo(filepath=f"{STATIC_UPLOAD_ROUTE}/{stored.filename}"))

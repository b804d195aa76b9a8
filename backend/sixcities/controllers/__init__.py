from sixcities.controllers.comment_controller import CommentController
from sixcities.controllers.offer_controller import OfferController
from sixcities.controllers.user_controller import UserController

__all__ = ["CommentController", "OfferController", "UserController"]

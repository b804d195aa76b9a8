from sixcities.models.comment import Comment
from sixcities.models.offer import Offer, favorites
from sixcities.models.user import User

__all__ = ["Comment", "Offer", "User", "favorites"]

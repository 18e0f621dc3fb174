from . import auth
from . import profile
from . import blogs
from . import buddies
from . import trips
from . import todos
from . import reviews
from . import chats
from . import groups
from . import admin
from . import destinations
from . import hotels

__all__ = [
    "auth",
    "profile",
    "blogs",
    "buddies",
    "trips",
    "todos",
    "reviews",
    "chats",
    "groups",
    "admin",
    "destinations",
    "hotels",
]

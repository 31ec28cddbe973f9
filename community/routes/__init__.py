"""
API route modules.
"""

from .articles import router as articles_router
from .auth import router as auth_router
from .comments import router as comments_router
from .me import router as me_router
from .misc import router as misc_router
from .users import router as users_router
from .waitlist import router as waitlist_router

__all__ = [
    "articles_router",
    "auth_router",
    "comments_router",
    "me_router",
    "misc_router",
    "users_router",
    "waitlist_router",
]

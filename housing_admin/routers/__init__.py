"""
API route handlers for the Housing Admin Console.
"""

from .auth import router as auth_router
from .users import router as users_router
from .admins import router as admins_router
from .houses import router as houses_router
from .listings import router as listings_router
from .reports import router as reports_router

__all__ = [
    "auth_router",
    "users_router",
    "admins_router",
    "houses_router",
    "listings_router",
    "reports_router"
]

"""
API Routers Package

FastAPI routers grouped by resource. Each router carries its own prefix
and is mounted under /api in main.py.

Router Structure:
- auth.py: /api/auth/* endpoints (registration, login, tokens)
- books.py: /api/books/* endpoints
- reviews.py: /api/reviews/* endpoints
"""

from app.routers.auth import router as auth_router
from app.routers.books import router as books_router
from app.routers.reviews import router as reviews_router

__all__ = [
    "auth_router",
    "books_router",
    "reviews_router",
]

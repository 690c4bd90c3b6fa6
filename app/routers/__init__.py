"""API routers package."""
from fastapi import APIRouter

from . import books, genres

router = APIRouter()
router.include_router(books.router, tags=["books"])
router.include_router(genres.router, tags=["genres"])

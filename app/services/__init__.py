"""Services package."""
from . import book_query, book_service, errors, repository

__all__ = [
    "book_query",
    "book_service",
    "errors",
    "repository",
]

"""Builders shared by the test modules."""
from decimal import Decimal
from typing import Iterable, List, Optional

from app.db.memory_repository import InMemoryBookRepository
from app.models.book_model import Book


def make_book(
    title: str = "Clean Code",
    author: str = "Robert C. Martin",
    genres: Optional[List[str]] = None,
    price: str = "19.99",
    **kwargs,
) -> Book:
    return Book(
        title=title,
        author=author,
        genres=genres or [],
        price=Decimal(price),
        **kwargs,
    )


async def add_genres(repository: InMemoryBookRepository, names: Iterable[str]) -> None:
    for name in names:
        await repository.create_genre(name)

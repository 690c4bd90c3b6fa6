"""Book catalog service."""
import math
from typing import List, Tuple

from app.models.book_model import Book
from app.models.query_model import GetBooksOptions
from app.services.repository import BookRepository
from app.utils.logger import get_logger

logger = get_logger(__name__)


def page_count(count: int, limit: int) -> int:
    """Number of pages needed to show ``count`` rows, ``limit`` per page."""
    return math.ceil(count / limit) if count > 0 else 0


class BookService:
    def __init__(self, repository: BookRepository) -> None:
        self.repository = repository

    async def get_books(self, options: GetBooksOptions) -> Tuple[List[Book], int]:
        books, count = await self.repository.get_books(options)
        logger.debug(
            f"Listed {len(books)} of {count} books (page={options.page}, "
            f"order_by={options.order_by.value}, desc={options.desc})"
        )
        return books, count

    async def get_book_by_id(self, book_id: str) -> Book:
        return await self.repository.get_book_by_id(book_id)

    async def get_genres(self) -> List[str]:
        return await self.repository.get_genres()

    async def create_genre(self, name: str) -> None:
        await self.repository.create_genre(name)
        logger.info(f"Created genre '{name}'")

    async def delete_genre(self, genre_id: str) -> None:
        await self.repository.delete_genre(genre_id)
        logger.info(f"Deleted genre {genre_id}")

    async def create_book(self, book: Book) -> Book:
        created = await self.repository.create_book(book)
        logger.info(f"Created book {created.id} with genres {created.genres}")
        return created

"""
Repository contract for the book catalog.

Routers and services depend only on this protocol. The relational adapter
(``app.db.postgres_repository``) and the in-memory double
(``app.db.memory_repository``) both implement it and raise the same
``app.services.errors`` exceptions for the same situations.
"""

from typing import Any, Dict, List, Optional, Protocol, Tuple
from uuid import UUID

from app.models.book_model import Book
from app.models.query_model import GetBooksOptions


def parse_id(value: str) -> Optional[UUID]:
    """Parse an id into the store's key type; ``None`` if it can't be one.

    Ids are UUIDs, so any casing or hyphenation the UUID parser accepts names
    the same entity.
    """
    try:
        return UUID(str(value))
    except ValueError:
        return None


class BookRepository(Protocol):
    async def get_books(self, options: GetBooksOptions) -> Tuple[List[Book], int]:
        """
        Return one page of matching books and the total match count.

        The count ignores paging. Books carry their full genre list.

        Raises:
            StorageTimeoutError: If the store does not answer in time
            StorageError: On any other storage failure
        """
        ...

    async def get_book_by_id(self, book_id: str) -> Book:
        """
        Raises:
            NotFoundError: If no book has this id (including malformed ids)
        """
        ...

    async def get_genres(self) -> List[str]:
        """Return every genre name."""
        ...

    async def create_genre(self, name: str) -> None:
        """
        Raises:
            AlreadyExistsError: If a genre with this exact name exists
        """
        ...

    async def delete_genre(self, genre_id: str) -> None:
        """
        Raises:
            NotFoundError: If no genre has this id (including malformed ids)
            GenreInUseError: If books still reference the genre
        """
        ...

    async def create_book(self, book: Book) -> Book:
        """
        Create a book and link it to its genres in one atomic step.

        Returns:
            The stored book with its assigned id

        Raises:
            NotFoundError: If any genre name does not exist; nothing is stored
            StorageError: On any other failure; nothing is stored
        """
        ...

    async def health(self) -> Dict[str, Any]:
        """Describe the backing store for health checks."""
        ...

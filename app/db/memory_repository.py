"""
In-memory implementation of the BookRepository contract.

Used as the test double for the HTTP layer and services. It reproduces the
relational adapter's filtering, ordering, paging and error behaviour without
a database. Setting ``fail_with`` makes every call raise that error.

Text keys sort case-insensitively first, then by their exact value, which
approximates a linguistic database collation. Punctuation and accents may
still order differently than PostgreSQL does.
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from app.models.book_model import Book
from app.models.query_model import BookOrder, GetBooksOptions
from app.services.errors import (
    AlreadyExistsError,
    BookstoreError,
    GenreInUseError,
    NotFoundError,
)
from app.services.repository import parse_id


class InMemoryBookRepository:
    def __init__(self) -> None:
        self.books: Dict[str, Book] = {}
        # genre id -> name
        self.genres: Dict[str, str] = {}
        # book id -> linked genre ids
        self.book_genres: Dict[str, List[str]] = {}
        self.fail_with: Optional[BookstoreError] = None

    def _check_failure(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _genre_id(self, name: str) -> Optional[str]:
        for genre_id, genre_name in self.genres.items():
            if genre_name == name:
                return genre_id
        return None

    def _materialize(self, book: Book) -> Book:
        names = sorted(self.genres[genre_id] for genre_id in self.book_genres.get(book.id, []))
        return book.model_copy(update={"genres": names}, deep=True)

    def _matches(self, book: Book, options: GetBooksOptions) -> bool:
        if options.author and options.author.lower() not in book.author.lower():
            return False
        if options.title and options.title.lower() not in book.title.lower():
            return False
        if options.genres:
            wanted = {genre.lower() for genre in options.genres}
            if not any(name.lower() in wanted for name in book.genres):
                return False
        return True

    async def get_books(self, options: GetBooksOptions) -> Tuple[List[Book], int]:
        self._check_failure()

        books = [self._materialize(book) for book in self.books.values()]
        matched = [book for book in books if self._matches(book, options)]

        def sort_key(book: Book) -> Tuple[str, ...]:
            if options.order_by is BookOrder.AUTHOR:
                primary, secondary = book.author, book.title
            else:
                primary, secondary = book.title, book.author
            return primary.casefold(), primary, secondary.casefold(), secondary, book.id

        matched.sort(key=sort_key, reverse=options.desc)
        page = matched[options.offset : options.offset + options.limit]
        return page, len(matched)

    async def get_book_by_id(self, book_id: str) -> Book:
        self._check_failure()
        key = parse_id(book_id)
        book = self.books.get(str(key)) if key is not None else None
        if book is None:
            raise NotFoundError(f"book {book_id!r} not found")
        return self._materialize(book)

    async def get_genres(self) -> List[str]:
        self._check_failure()
        return sorted(self.genres.values())

    async def create_genre(self, name: str) -> None:
        self._check_failure()
        if self._genre_id(name) is not None:
            raise AlreadyExistsError(f"genre '{name}' already exists")
        self.genres[str(uuid4())] = name

    async def delete_genre(self, genre_id: str) -> None:
        self._check_failure()
        key = parse_id(genre_id)
        if key is None or str(key) not in self.genres:
            raise NotFoundError(f"genre {genre_id!r} not found")
        if any(str(key) in linked for linked in self.book_genres.values()):
            raise GenreInUseError(f"genre {genre_id!r} is still referenced by books")
        del self.genres[str(key)]

    async def create_book(self, book: Book) -> Book:
        self._check_failure()

        names = list(dict.fromkeys(book.genres))
        genre_ids = [self._genre_id(name) for name in names]
        missing = [name for name, genre_id in zip(names, genre_ids) if genre_id is None]
        if missing:
            raise NotFoundError(f"genres not found: {', '.join(missing)}")

        created = book.model_copy(update={"id": str(uuid4()), "genres": names}, deep=True)
        self.books[created.id] = created
        self.book_genres[created.id] = [genre_id for genre_id in genre_ids if genre_id]
        return created.model_copy(deep=True)

    async def health(self) -> Dict[str, Any]:
        self._check_failure()
        return {
            "backend": "memory",
            "counts": {"books": len(self.books), "genres": len(self.genres)},
        }

    def genre_id_by_name(self, name: str) -> str:
        """Look up a genre id, for tests and seeding."""
        genre_id = self._genre_id(name)
        if genre_id is None:
            raise NotFoundError(f"genre '{name}' not found")
        return genre_id

"""
PostgreSQL implementation of the BookRepository contract.

Every public call runs under a deadline (``timeout`` seconds) that covers
acquiring a pooled connection, the statements and the commit. When the
deadline passes the call is cancelled, which rolls back any open
transaction, and ``StorageTimeoutError`` is raised.

asyncpg failures are translated here; nothing above this module sees
asyncpg types or SQLSTATE codes.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar
from uuid import UUID

import asyncpg

from app.models.book_model import Book
from app.models.query_model import GetBooksOptions
from app.services.book_query import BOOK_COLUMNS, BOOK_GENRE_JOINS, build_book_query
from app.services.errors import (
    AlreadyExistsError,
    BookstoreError,
    GenreInUseError,
    NotFoundError,
    StorageError,
    StorageTimeoutError,
)
from app.services.repository import parse_id
from app.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 5.0

GET_BOOK_BY_ID = f"""
    SELECT {BOOK_COLUMNS}
    FROM book
    {BOOK_GENRE_JOINS}
    WHERE book.id = $1
    GROUP BY book.id
"""

GET_GENRES = "SELECT name FROM genre ORDER BY name"

CREATE_GENRE = "INSERT INTO genre (name) VALUES ($1)"

DELETE_GENRE = "DELETE FROM genre WHERE id = $1"

GET_GENRES_BY_NAME = "SELECT id, name FROM genre WHERE name = ANY($1::text[])"

CREATE_BOOK = """
    INSERT INTO book (title, author, description, cover_image, price)
    VALUES ($1, $2, $3, $4, $5)
    RETURNING id, price
"""

CREATE_BOOK_GENRE = "INSERT INTO book_genre (book_id, genre_id) VALUES ($1, $2)"


def affected_rows(status: str) -> int:
    """Row count from a command status such as ``'DELETE 1'``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError):
        return 0


def record_to_book(record: Any) -> Book:
    return Book(
        id=str(record["id"]),
        title=record["title"],
        author=record["author"],
        description=record["description"],
        cover_image=record["cover_image"],
        genres=list(record["genres"] or []),
        price=record["price"],
    )


class PostgresBookRepository:
    def __init__(self, pool: asyncpg.pool.Pool, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._pool = pool
        self._timeout = timeout

    async def _run(self, operation: Callable[[asyncpg.Connection], Awaitable[T]]) -> T:
        """Run ``operation`` on a pooled connection under the call deadline."""

        async def with_connection() -> T:
            async with self._pool.acquire() as conn:
                return await operation(conn)

        try:
            return await asyncio.wait_for(with_connection(), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"Storage call timed out after {self._timeout}s")
            raise StorageTimeoutError(f"operation timed out after {self._timeout}s") from e
        except BookstoreError:
            raise
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise StorageError(str(e)) from e

    async def get_books(self, options: GetBooksOptions) -> Tuple[List[Book], int]:
        query = build_book_query(options)

        async def operation(conn: asyncpg.Connection) -> Tuple[List[Book], int]:
            # Count and page come from the same snapshot
            async with conn.transaction(isolation="repeatable_read", readonly=True):
                count = await conn.fetchval(query.count_sql, *query.count_params)
                rows = await conn.fetch(query.page_sql, *query.page_params)
            return [record_to_book(row) for row in rows], int(count)

        return await self._run(operation)

    async def get_book_by_id(self, book_id: str) -> Book:
        key = parse_id(book_id)
        if key is None:
            raise NotFoundError(f"book {book_id!r} not found")

        async def operation(conn: asyncpg.Connection) -> Optional[asyncpg.Record]:
            return await conn.fetchrow(GET_BOOK_BY_ID, key)

        record = await self._run(operation)
        if record is None:
            raise NotFoundError(f"book {book_id!r} not found")
        return record_to_book(record)

    async def get_genres(self) -> List[str]:
        async def operation(conn: asyncpg.Connection) -> List[asyncpg.Record]:
            return await conn.fetch(GET_GENRES)

        rows = await self._run(operation)
        return [row["name"] for row in rows]

    async def create_genre(self, name: str) -> None:
        async def operation(conn: asyncpg.Connection) -> None:
            try:
                await conn.execute(CREATE_GENRE, name)
            except asyncpg.UniqueViolationError as e:
                raise AlreadyExistsError(f"genre '{name}' already exists") from e

        await self._run(operation)

    async def delete_genre(self, genre_id: str) -> None:
        key = parse_id(genre_id)
        if key is None:
            raise NotFoundError(f"genre {genre_id!r} not found")

        async def operation(conn: asyncpg.Connection) -> str:
            try:
                return await conn.execute(DELETE_GENRE, key)
            except asyncpg.ForeignKeyViolationError as e:
                raise GenreInUseError(f"genre {genre_id!r} is still referenced by books") from e

        status = await self._run(operation)
        if affected_rows(status) == 0:
            raise NotFoundError(f"genre {genre_id!r} not found")

    async def create_book(self, book: Book) -> Book:
        names = list(dict.fromkeys(book.genres))

        async def operation(conn: asyncpg.Connection) -> Book:
            async with conn.transaction():
                rows = await conn.fetch(GET_GENRES_BY_NAME, names) if names else []
                genre_ids: Dict[str, UUID] = {row["name"]: row["id"] for row in rows}
                missing = [name for name in names if name not in genre_ids]
                if missing:
                    raise NotFoundError(f"genres not found: {', '.join(missing)}")

                created = await conn.fetchrow(
                    CREATE_BOOK,
                    book.title,
                    book.author,
                    book.description,
                    book.cover_image,
                    book.price,
                )
                try:
                    if genre_ids:
                        await conn.executemany(
                            CREATE_BOOK_GENRE,
                            [(created["id"], genre_ids[name]) for name in names],
                        )
                except asyncpg.ForeignKeyViolationError as e:
                    # Genre removed by a concurrent delete after it was resolved
                    raise NotFoundError("referenced genre no longer exists") from e

            return book.model_copy(
                update={"id": str(created["id"]), "genres": names, "price": created["price"]}
            )

        return await self._run(operation)

    async def health(self) -> Dict[str, Any]:
        async def operation(conn: asyncpg.Connection) -> Dict[str, Any]:
            version = await conn.fetchval("SELECT version()")
            books = await conn.fetchval("SELECT COUNT(*) FROM book")
            genres = await conn.fetchval("SELECT COUNT(*) FROM genre")
            return {
                "backend": "postgres",
                "version": version.split(",")[0] if version else "unknown",
                "counts": {"books": books, "genres": genres},
            }

        return await self._run(operation)

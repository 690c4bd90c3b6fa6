"""SQL plan for the paginated, filterable book listing."""
from dataclasses import dataclass
from typing import Any, List, Tuple

from app.models.query_model import BookOrder, GetBooksOptions

ORDER_COLUMNS = {
    BookOrder.TITLE: "book.title",
    BookOrder.AUTHOR: "book.author",
}

BOOK_COLUMNS = """
    book.id::text AS id,
    book.title,
    book.author,
    book.description,
    book.cover_image,
    book.price,
    COALESCE(
        ARRAY_AGG(genre.name ORDER BY genre.name) FILTER (WHERE genre.name IS NOT NULL),
        '{}'
    ) AS genres
"""

BOOK_GENRE_JOINS = """
    LEFT JOIN book_genre ON book_genre.book_id = book.id
    LEFT JOIN genre ON genre.id = book_genre.genre_id
"""


def escape_like(keyword: str) -> str:
    """Escape LIKE metacharacters so the keyword matches literally."""
    return keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(keyword: str) -> str:
    return f"%{escape_like(keyword)}%"


@dataclass
class BookQuery:
    count_sql: str
    count_params: List[Any]
    page_sql: str
    page_params: List[Any]


def build_where(options: GetBooksOptions) -> Tuple[str, List[Any]]:
    """Build the shared WHERE clause and its positional parameters."""
    where = "WHERE 1=1"
    params: List[Any] = []
    param_count = 0

    if options.author:
        param_count += 1
        where += f" AND book.author ILIKE ${param_count}"
        params.append(contains_pattern(options.author))

    if options.title:
        param_count += 1
        where += f" AND book.title ILIKE ${param_count}"
        params.append(contains_pattern(options.title))

    if options.genres:
        param_count += 1
        where += f"""
        AND EXISTS (
            SELECT 1
            FROM book_genre AS bg
            JOIN genre AS g ON g.id = bg.genre_id
            WHERE bg.book_id = book.id AND LOWER(g.name) = ANY(${param_count}::text[])
        )"""
        params.append([genre.lower() for genre in options.genres])

    return where, params


def build_order_by(options: GetBooksOptions) -> str:
    """Primary key, then the other text key, then id; one direction for all."""
    direction = "DESC" if options.desc else "ASC"
    primary = ORDER_COLUMNS[options.order_by]
    secondary = ORDER_COLUMNS[options.order_by.tie_break]
    return f"ORDER BY {primary} {direction}, {secondary} {direction}, book.id {direction}"


def build_book_query(options: GetBooksOptions) -> BookQuery:
    where, params = build_where(options)

    count_sql = f"SELECT COUNT(*) FROM book {where}"

    limit_param = len(params) + 1
    offset_param = len(params) + 2
    page_sql = f"""
    SELECT {BOOK_COLUMNS}
    FROM book
    {BOOK_GENRE_JOINS}
    {where}
    GROUP BY book.id
    {build_order_by(options)}
    LIMIT ${limit_param} OFFSET ${offset_param}
    """

    return BookQuery(
        count_sql=count_sql,
        count_params=list(params),
        page_sql=page_sql,
        page_params=[*params, options.limit, options.offset],
    )

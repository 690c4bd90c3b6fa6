"""Listing options for the book catalog."""
from enum import Enum
from typing import Any, List

from pydantic import BaseModel, Field, field_validator

DEFAULT_PAGE_SIZE = 10
# Largest OFFSET the database accepts (bigint)
MAX_OFFSET = 2**63 - 1


class BookOrder(str, Enum):
    TITLE = "title"
    AUTHOR = "author"

    @property
    def tie_break(self) -> "BookOrder":
        return BookOrder.AUTHOR if self is BookOrder.TITLE else BookOrder.TITLE


class GetBooksOptions(BaseModel):
    """Paging, ordering and filters for a book listing.

    ``page`` is 1-based and anything below 1 is treated as the first page.
    Unknown ``order_by`` values fall back to ordering by title.
    """

    page: int = 1
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    order_by: BookOrder = BookOrder.TITLE
    desc: bool = False
    author: str = ""
    title: str = ""
    genres: List[str] = Field(default_factory=list)

    @field_validator("page", mode="after")
    @classmethod
    def _first_page_floor(cls, value: int) -> int:
        return value if value > 0 else 1

    @field_validator("order_by", mode="before")
    @classmethod
    def _known_order_or_title(cls, value: Any) -> Any:
        if isinstance(value, BookOrder):
            return value
        try:
            return BookOrder(str(value).strip().lower())
        except ValueError:
            return BookOrder.TITLE

    @field_validator("author", "title", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("genres", mode="before")
    @classmethod
    def _clean_genres(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [genre.strip() for genre in value if genre and genre.strip()]

    @property
    def offset(self) -> int:
        # Pages past this point are empty anyway
        return min((self.page - 1) * self.limit, MAX_OFFSET)

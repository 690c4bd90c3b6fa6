"""Book models."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List

from pydantic import BaseModel, Field, field_serializer, field_validator

PRICE_QUANTUM = Decimal("0.01")
# Exclusive ceiling of the NUMERIC(12, 2) price column
PRICE_LIMIT = Decimal("10000000000")


def to_price(value: Any) -> Decimal:
    """Convert a number to a 2-decimal fixed-precision price.

    Floats go through their shortest ``repr`` so ``69.99`` stays ``69.99``
    instead of picking up binary representation noise.
    """
    if isinstance(value, float):
        value = repr(value)
    return Decimal(str(value)).quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


class Book(BaseModel):
    id: str = ""
    title: str
    author: str
    description: str = ""
    cover_image: str = ""
    genres: List[str] = Field(default_factory=list)
    price: Decimal

    model_config = {"from_attributes": True}

    @field_validator("description", "cover_image", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("genres", mode="before")
    @classmethod
    def _genres_never_null(cls, value: Any) -> Any:
        return [] if value is None else list(value)

    @field_validator("price")
    @classmethod
    def _quantize_price(cls, value: Decimal) -> Decimal:
        return to_price(value)

    @field_serializer("price")
    def _price_as_number(self, price: Decimal) -> float:
        return float(price)


class BookCreate(BaseModel):
    """Payload for ``POST /book``."""

    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    description: str = ""
    cover_image: str = ""
    genres: List[str]
    price: Decimal = Field(..., gt=0)

    @field_validator("price")
    @classmethod
    def _price_in_column_range(cls, value: Decimal) -> Decimal:
        # Bound checked before and after rounding; huge values can't be quantized
        if value >= PRICE_LIMIT:
            raise ValueError(f"should be less than {PRICE_LIMIT}")
        price = to_price(value)
        if price <= 0:
            raise ValueError("should be greater than 0")
        if price >= PRICE_LIMIT:
            raise ValueError(f"should be less than {PRICE_LIMIT}")
        return price

    def to_book(self) -> Book:
        # Repeated genre names collapse to one association
        genres = list(dict.fromkeys(self.genres))
        return Book(
            title=self.title,
            author=self.author,
            description=self.description,
            cover_image=self.cover_image,
            genres=genres,
            price=self.price,
        )


class BookPage(BaseModel):
    books: List[Book]
    pages: int

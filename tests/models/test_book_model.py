"""
Tests for the book models.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.models.book_model import Book, BookCreate, to_price


class TestToPrice:
    """Fixed-precision price conversion."""

    def test_float_keeps_its_decimal_digits(self):
        assert to_price(69.99) == Decimal("69.99")
        assert str(to_price(69.99)) == "69.99"

    def test_integer_gets_two_places(self):
        assert str(to_price(69)) == "69.00"

    def test_rounds_half_up_to_cents(self):
        assert to_price("1.005") == Decimal("1.01")
        assert to_price("1.004") == Decimal("1.00")

    def test_decimal_passthrough(self):
        assert to_price(Decimal("12.5")) == Decimal("12.50")


class TestBook:
    """Tests for the Book model."""

    def test_defaults(self):
        book = Book(title="Dune", author="Frank Herbert", price=Decimal("9.99"))

        assert book.id == ""
        assert book.description == ""
        assert book.cover_image == ""
        assert book.genres == []

    def test_null_optional_fields_become_empty(self):
        book = Book(
            title="Dune",
            author="Frank Herbert",
            price=Decimal("9.99"),
            description=None,
            cover_image=None,
            genres=None,
        )

        assert book.description == ""
        assert book.cover_image == ""
        assert book.genres == []

    def test_price_serializes_as_number(self):
        book = Book(title="Dune", author="Frank Herbert", price=69.99, genres=["scifi"])

        data = book.model_dump(mode="json")

        assert data["price"] == 69.99
        assert isinstance(data["price"], float)
        assert data["genres"] == ["scifi"]

    def test_json_shape(self):
        book = Book(id="abc", title="T", author="A", price=Decimal("1.50"))

        assert set(book.model_dump(mode="json")) == {
            "id", "title", "author", "description", "cover_image", "genres", "price",
        }


class TestBookCreate:
    """Validation of the create-book payload."""

    def test_valid_payload(self):
        payload = BookCreate(title="T", author="A", genres=["horror"], price=69)

        assert payload.price == Decimal("69.00")
        assert payload.description == ""

    @pytest.mark.parametrize("price", [0, -1, "0.004"])
    def test_rejects_non_positive_price(self, price):
        with pytest.raises(ValidationError):
            BookCreate(title="T", author="A", genres=[], price=price)

    def test_rejects_empty_title(self):
        with pytest.raises(ValidationError):
            BookCreate(title="", author="A", genres=[], price=1)

    def test_genres_are_required(self):
        with pytest.raises(ValidationError):
            BookCreate(title="T", author="A", price=1)

    def test_to_book_collapses_repeated_genres(self):
        payload = BookCreate(
            title="T", author="A", genres=["horror", "scifi", "horror"], price="10.10"
        )

        book = payload.to_book()

        assert book.id == ""
        assert book.genres == ["horror", "scifi"]
        assert book.price == Decimal("10.10")

    @pytest.mark.parametrize("price", ["10000000000", "1e12", "1e40", "9999999999.995"])
    def test_rejects_price_beyond_column_range(self, price):
        with pytest.raises(ValidationError, match="should be less than 10000000000"):
            BookCreate(title="T", author="A", genres=[], price=price)

    def test_accepts_largest_storable_price(self):
        payload = BookCreate(title="T", author="A", genres=[], price="9999999999.99")

        assert payload.price == Decimal("9999999999.99")

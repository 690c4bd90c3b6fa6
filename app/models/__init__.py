"""Pydantic models for the catalog API."""
from .book_model import Book, BookCreate, BookPage, to_price
from .genre_model import GenreCreate
from .query_model import BookOrder, GetBooksOptions

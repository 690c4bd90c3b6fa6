"""Book endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.config import settings
from app.models.book_model import Book, BookCreate, BookPage
from app.models.query_model import GetBooksOptions
from app.services.book_service import BookService, page_count
from app.services.errors import NotFoundError
from app.utils.dependencies import get_book_service
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/books", response_model=BookPage)
async def list_books(
    order_by: str = Query("title", description="Sort key: 'title' or 'author'"),
    desc: bool = Query(False, description="Sort descending"),
    page: int = Query(1, description="1-based page number"),
    author: str = Query("", description="Case-insensitive author substring"),
    title: str = Query("", description="Case-insensitive title substring"),
    genres: str = Query("", description="Comma separated genre names"),
    service: BookService = Depends(get_book_service),
):
    """List books with filtering, ordering and pagination."""
    options = GetBooksOptions(
        page=page,
        limit=settings.page_size,
        order_by=order_by,
        desc=desc,
        author=author,
        title=title,
        genres=genres,
    )
    books, count = await service.get_books(options)
    return BookPage(books=books, pages=page_count(count, options.limit))


@router.get("/book/{book_id}", response_model=Book)
async def get_book(book_id: str, service: BookService = Depends(get_book_service)):
    """Get book details by ID."""
    try:
        return await service.get_book_by_id(book_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="book not found")


@router.post("/book", response_model=Book, status_code=status.HTTP_201_CREATED)
async def create_book(payload: BookCreate, service: BookService = Depends(get_book_service)):
    """Create a book linked to existing genres."""
    try:
        return await service.create_book(payload.to_book())
    except NotFoundError as e:
        logger.info(f"Rejected book '{payload.title}': {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid genre")

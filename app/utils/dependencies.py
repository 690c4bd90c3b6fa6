"""FastAPI dependencies."""
from fastapi import HTTPException, Request, status

from app.services.book_service import BookService


def get_book_service(request: Request) -> BookService:
    """Return the service bound to the running application."""
    service = getattr(request.app.state, "book_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="catalog storage is not ready",
        )
    return service

"""FastAPI entrypoint for the bookstore catalog service."""
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from app.config import settings
from app.db.connection import close_pool, init_db
from app.db.postgres_repository import PostgresBookRepository
from app.routers import router as catalog_router
from app.services.book_service import BookService
from app.services.errors import (
    AlreadyExistsError,
    BookstoreError,
    GenreInUseError,
    NotFoundError,
)
from app.services.repository import BookRepository
from app.utils.logger import get_logger
from app.utils.validation import format_validation_errors

logger = get_logger(__name__)

MSG_INTERNAL_ERROR = "oops something went wrong"


def create_app(repository: Optional[BookRepository] = None) -> FastAPI:
    """Build the application.

    Without a repository the app connects to PostgreSQL on startup. Passing
    one (e.g. the in-memory double) skips the database entirely.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if repository is not None:
            yield
            return

        pool = await init_db()
        app.state.book_service = BookService(
            PostgresBookRepository(pool, timeout=settings.db_timeout_seconds)
        )
        try:
            yield
        finally:
            await close_pool()

    app = FastAPI(
        title="Bookstore Catalog API",
        version="0.1.0",
        description="Book listing, book creation and genre management for the bookstore.",
        lifespan=lifespan,
    )

    if repository is not None:
        app.state.book_service = BookService(repository)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://127.0.0.1:5173",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://localhost:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": format_validation_errors(exc.errors())},
        )

    @app.exception_handler(BookstoreError)
    async def bookstore_error_handler(request: Request, exc: BookstoreError):
        # Routers handle the expected cases with specific messages
        if isinstance(exc, NotFoundError):
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "not found"})
        if isinstance(exc, AlreadyExistsError):
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})
        if isinstance(exc, GenreInUseError):
            return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

        logger.error(f"{request.method} {request.url.path} failed: {exc!r}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": MSG_INTERNAL_ERROR},
        )

    @app.get("/health", tags=["health"], response_class=PlainTextResponse)
    async def healthcheck():
        """Basic health check."""
        return "ok"

    @app.get("/health/db", tags=["health"])
    async def db_healthcheck(request: Request):
        """Storage connectivity health check."""
        service: Optional[BookService] = getattr(request.app.state, "book_service", None)
        if service is None:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "error", "error": "storage not initialised"},
            )
        try:
            details = await service.repository.health()
        except BookstoreError as e:
            logger.error(f"Storage health check failed: {e!r}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "error", "type": type(e).__name__},
            )
        return {"status": "connected", "env": settings.app_env, "database": details}

    app.include_router(catalog_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="127.0.0.1", port=5000)

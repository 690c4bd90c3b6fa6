"""Genre endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.models.genre_model import GenreCreate
from app.services.book_service import BookService
from app.services.errors import AlreadyExistsError, GenreInUseError, NotFoundError
from app.utils.dependencies import get_book_service

router = APIRouter()


@router.get("/genres", response_model=List[str])
async def list_genres(service: BookService = Depends(get_book_service)):
    """Get all genre names."""
    return await service.get_genres()


@router.post("/genre", status_code=status.HTTP_201_CREATED)
async def create_genre(payload: GenreCreate, service: BookService = Depends(get_book_service)):
    try:
        await service.create_genre(payload.name)
    except AlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"genre '{payload.name}' already exists",
        )
    return Response(status_code=status.HTTP_201_CREATED)


@router.delete("/genre/{genre_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_genre(genre_id: str, service: BookService = Depends(get_book_service)):
    try:
        await service.delete_genre(genre_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="genre not found")
    except GenreInUseError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="genre is still referenced by books",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)

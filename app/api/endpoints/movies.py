# backend/app/api/endpoints/movies.py

import logging
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api.deps import get_db, get_cache, get_current_user, get_current_admin
from app.data_access.redis_client import CacheRepository
from app.models.movie import (
    MessageResponse,
    MovieCreate,
    MovieRead,
    MovieUpdate,
    PaginatedMovieResponse,
    ReviewCreate,
)
from app.models.user import UserRead
from app.services.movie_service import (
    DuplicateReviewError,
    InvalidMovieDataError,
    MovieNotFoundError,
    MovieService,
    ReviewWriteConflictError,
)
from app.utils.helpers import parse_page_number

logger = logging.getLogger(__name__)
router = APIRouter()

# --- Dependency to get the service ---
def get_movie_service(
    db: AsyncIOMotorDatabase = Depends(get_db),
    cache: Optional[CacheRepository] = Depends(get_cache),
) -> MovieService:
    return MovieService(db=db, cache=cache)
# --- ---

# ************ PUBLIC ENDPOINTS ************
# Fixed paths are registered before /{movie_id} so they are not captured by it.

@router.post(
    "/import", # POST /api/movies/import
    response_model=List[MovieRead],
    status_code=status.HTTP_201_CREATED,
    summary="Import Seed Movies",
    description="Deletes every movie and inserts the built-in seed catalog.",
)
async def import_movies(
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        return await movie_service.import_movies()
    except Exception as e:
        logger.error(f"Error importing movies: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get(
    "", # GET /api/movies
    response_model=PaginatedMovieResponse,
    summary="List Movies",
    description="Retrieve one page (10 movies) of the catalog, optionally filtered.",
)
async def list_movies(
    category: Optional[str] = Query(None, description="Exact category title."),
    time: Optional[str] = Query(None, description="Exact runtime in minutes."),
    language: Optional[str] = Query(None, description="Exact language."),
    rate: Optional[str] = Query(None, description="Exact average rating."),
    year: Optional[str] = Query(None, description="Exact release year."),
    search: Optional[str] = Query(None, description="Case-insensitive substring of the movie name."),
    pageNumber: Optional[str] = Query(None, description="Page number, defaults to 1."),
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        return await movie_service.get_movies(
            page=parse_page_number(pageNumber),
            category=category,
            time=time,
            language=language,
            rate=rate,
            year=year,
            search=search,
        )
    except InvalidMovieDataError as e:
        logger.warning(f"Rejected movie filters: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error listing movies: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get(
    "/rated/top", # GET /api/movies/rated/top
    response_model=List[MovieRead],
    summary="Top Rated Movies",
)
async def top_rated_movies(
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        return await movie_service.get_top_rated_movies()
    except Exception as e:
        logger.error(f"Error getting top rated movies: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get(
    "/random/all", # GET /api/movies/random/all
    response_model=List[MovieRead],
    summary="Random Movies",
)
async def random_movies(
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        return await movie_service.get_random_movies()
    except Exception as e:
        logger.error(f"Error getting random movies: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get(
    "/{movie_id}", # GET /api/movies/{movie_id}
    response_model=MovieRead,
    summary="Get Movie Details",
    responses={404: {"description": "Movie not found"}},
)
async def get_movie(
    movie_id: str,
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        return await movie_service.get_movie_by_id(movie_id)
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error getting movie {movie_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# ************ PRIVATE ENDPOINTS ************

@router.post(
    "/{movie_id}/reviews", # POST /api/movies/{movie_id}/reviews
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review Movie",
    responses={
        400: {"description": "Already reviewed by this user"},
        404: {"description": "Movie not found"},
    },
)
async def create_movie_review(
    movie_id: str,
    review_data: ReviewCreate,
    current_user: UserRead = Depends(get_current_user),
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        await movie_service.add_review(movie_id, current_user, review_data)
        return MessageResponse(message="Review added")
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (DuplicateReviewError, ReviewWriteConflictError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error reviewing movie {movie_id} for user {current_user.id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

# ************ ADMIN ENDPOINTS ************

@router.put(
    "/{movie_id}", # PUT /api/movies/{movie_id}
    response_model=MovieRead,
    status_code=status.HTTP_201_CREATED,
    summary="Update Movie",
    description="Sparse update: only supplied, non-empty fields are written.",
    responses={404: {"description": "Movie not found"}},
)
async def update_movie(
    movie_id: str,
    movie_data: MovieUpdate,
    admin: UserRead = Depends(get_current_admin),
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        return await movie_service.update_movie(movie_id, movie_data)
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating movie {movie_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete(
    "/{movie_id}", # DELETE /api/movies/{movie_id}
    response_model=MessageResponse,
    summary="Delete Movie",
    responses={404: {"description": "Movie not found"}},
)
async def delete_movie(
    movie_id: str,
    admin: UserRead = Depends(get_current_admin),
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        await movie_service.delete_movie(movie_id)
        return MessageResponse(message="Movie removed")
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting movie {movie_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete(
    "", # DELETE /api/movies
    response_model=MessageResponse,
    summary="Delete All Movies",
)
async def delete_all_movies(
    admin: UserRead = Depends(get_current_admin),
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        await movie_service.delete_all_movies()
        return MessageResponse(message="All movies removed")
    except Exception as e:
        logger.error(f"Error deleting all movies: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.post(
    "", # POST /api/movies
    response_model=MovieRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Movie",
    responses={400: {"description": "Invalid movie data"}},
)
async def create_movie(
    movie_data: MovieCreate,
    admin: UserRead = Depends(get_current_admin),
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        return await movie_service.create_movie(movie_data, creator_id=admin.id)
    except InvalidMovieDataError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating movie: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

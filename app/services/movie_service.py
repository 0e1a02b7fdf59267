# backend/app/services/movie_service.py

import copy
import logging
import math
import re
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any, Union

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError, WriteError

from app.core.config import settings
from app.data.movie_data import MOVIES_DATA
from app.data_access.redis_client import CacheRepository, TOP_RATED_CACHE_KEY
from app.models.movie import (
    MovieCreate,
    MovieRead,
    MovieUpdate,
    PaginatedMovieResponse,
    ReviewCreate,
)
from app.models.user import UserRead
from app.utils.helpers import calculate_skip, calculate_total_pages, is_supplied, to_object_id

logger = logging.getLogger(__name__)

# --- Constants ---
PAGE_SIZE = 10
RANDOM_SAMPLE_SIZE = 8
MAX_REVIEW_WRITE_ATTEMPTS = 3
EXACT_MATCH_FILTERS = ("category", "language")
NUMERIC_FILTERS = ("time", "rate", "year")
UPDATABLE_FIELDS = (
    "name", "desc", "image", "titleImage", "rate", "numberOfReviews",
    "category", "time", "language", "year", "video", "casts",
)

class MovieNotFoundError(Exception):
    """Custom exception when a movie is not found."""
    pass

class DuplicateReviewError(Exception):
    """Raised when a user submits a second review for the same movie."""
    pass

class InvalidMovieDataError(Exception):
    """Raised when filter values or movie data are rejected."""
    pass

class ReviewWriteConflictError(Exception):
    """Raised when a review could not be stored because the movie kept changing underneath it."""
    pass


def _to_number(field: str, raw: Union[str, int, float]) -> Union[int, float]:
    """Casts a query value to the numeric type stored on the document."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidMovieDataError(f"Cast to Number failed for value \"{raw}\" at path \"{field}\"")
    if not math.isfinite(value):
        raise InvalidMovieDataError(f"Cast to Number failed for value \"{raw}\" at path \"{field}\"")
    return int(value) if value.is_integer() else value


class MovieService:
    def __init__(self, db: AsyncIOMotorDatabase, cache: Optional[CacheRepository] = None):
        """
        Initializes the Movie Service.

        Args:
            db: An instance of AsyncIOMotorDatabase (Motor client).
            cache: Optional cache for the top rated list; None disables caching.
        """
        self.db = db
        self.cache = cache
        self.collection = db["movies"]

    # --- Helper Methods ---

    async def _invalidate_cache(self):
        if self.cache is not None:
            await self.cache.bump_version(TOP_RATED_CACHE_KEY)

    async def _find_or_raise(self, movie_id: str) -> Dict[str, Any]:
        obj_id = to_object_id(movie_id)
        if obj_id is None:
            raise MovieNotFoundError("Movie not found")
        doc = await self.collection.find_one({"_id": obj_id})
        if doc is None:
            logger.warning(f"Movie with ID {movie_id} not found in database.")
            raise MovieNotFoundError("Movie not found")
        return doc

    @staticmethod
    def _to_read(doc: Dict[str, Any]) -> MovieRead:
        return MovieRead(id=str(doc["_id"]), **doc)

    def build_movie_query(
        self,
        category: Optional[str] = None,
        time: Optional[str] = None,
        language: Optional[str] = None,
        rate: Optional[str] = None,
        year: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Builds the MongoDB filter for the movie listing. Each supplied filter is
        ANDed in; empty values are ignored.

        Raises:
            InvalidMovieDataError: If a numeric filter is not a number.
        """
        supplied = {"category": category, "time": time, "language": language, "rate": rate, "year": year}
        query: Dict[str, Any] = {}
        for field in EXACT_MATCH_FILTERS:
            if supplied[field]:
                query[field] = supplied[field]
        for field in NUMERIC_FILTERS:
            if supplied[field]:
                query[field] = _to_number(field, supplied[field])
        if search:
            # Case-insensitive substring match on the name, term taken literally
            query["name"] = {"$regex": re.escape(search), "$options": "i"}
        return query

    # --- Query path ---

    async def get_movies(self, page: int = 1, **filters: Optional[str]) -> PaginatedMovieResponse:
        """
        Retrieves one page of movies matching the filters.

        Args:
            page: Page number (1-based). Pages hold PAGE_SIZE movies.
            **filters: category, time, language, rate, year, search.

        Returns:
            A PaginatedMovieResponse. `totalMovies` counts every match, not just this page.

        Raises:
            InvalidMovieDataError: If a numeric filter is not a number.
            PyMongoError: If a database error occurs.
        """
        query = self.build_movie_query(**filters)
        skip = calculate_skip(page, PAGE_SIZE)

        try:
            movies_list_raw = await self.collection.find(query).skip(skip).limit(PAGE_SIZE).to_list(length=PAGE_SIZE)
            total_items = await self.collection.count_documents(query)
        except PyMongoError as e:
            logger.error(f"Database error while fetching movies: {e}", exc_info=True)
            raise

        total_pages = calculate_total_pages(total_items, PAGE_SIZE)
        logger.info(f"Fetched {len(movies_list_raw)} movies (page {page}/{total_pages}, total {total_items}) with query: {query}")
        return PaginatedMovieResponse(
            movies=[self._to_read(doc) for doc in movies_list_raw],
            page=page,
            pages=total_pages,
            totalMovies=total_items,
        )

    async def get_movie_by_id(self, movie_id: str) -> MovieRead:
        """
        Retrieves a single movie.

        Raises:
            MovieNotFoundError: If the id is malformed or does not resolve.
            PyMongoError: If a database error occurs.
        """
        try:
            doc = await self._find_or_raise(movie_id)
        except PyMongoError as e:
            logger.error(f"Database error while fetching movie {movie_id}: {e}", exc_info=True)
            raise
        return self._to_read(doc)

    async def get_top_rated_movies(self) -> List[MovieRead]:
        """All movies ordered by `rate`, highest first. Ties have no defined order."""
        # Generation is read before the database so a concurrent write makes this fill unreachable
        version = await self.cache.current_version(TOP_RATED_CACHE_KEY) if self.cache is not None else None
        if version is not None:
            cached = await self.cache.get(CacheRepository.versioned_key(TOP_RATED_CACHE_KEY, version))
            if isinstance(cached, list):
                return [MovieRead.model_validate(item) for item in cached]

        try:
            docs = await self.collection.find({}).sort("rate", -1).to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Database error while fetching top rated movies: {e}", exc_info=True)
            raise

        movies = [self._to_read(doc) for doc in docs]
        if version is not None:
            await self.cache.set(
                CacheRepository.versioned_key(TOP_RATED_CACHE_KEY, version),
                [m.model_dump(mode="json") for m in movies],
                ttl_seconds=settings.CACHE_TTL_TOP_RATED,
            )
        return movies

    async def get_random_movies(self, size: int = RANDOM_SAMPLE_SIZE) -> List[MovieRead]:
        """Up to `size` movies drawn with $sample; fewer only when the catalog is smaller."""
        try:
            cursor = self.collection.aggregate([{"$sample": {"size": size}}])
            docs = await cursor.to_list(length=size)
        except PyMongoError as e:
            logger.error(f"Database error getting random movies: {e}", exc_info=True)
            raise
        return [self._to_read(doc) for doc in docs]

    # --- Mutation path ---

    async def import_movies(self) -> List[MovieRead]:
        """
        Replaces the whole catalog with the built-in seed dataset.

        Every existing movie is deleted first. Readers may observe an empty
        catalog between the delete and the insert.
        """
        now = datetime.now(timezone.utc)
        docs = []
        for seed in MOVIES_DATA:
            doc = copy.deepcopy(seed)
            doc.setdefault("reviews", [])
            doc.setdefault("casts", [])
            doc["createdAt"] = now
            doc["updatedAt"] = now
            docs.append(doc)

        try:
            deleted = await self.collection.delete_many({})
            result = await self.collection.insert_many(docs)
        except PyMongoError as e:
            logger.error(f"Database error importing movies: {e}", exc_info=True)
            raise

        await self._invalidate_cache()
        logger.info(f"Movie import: removed {deleted.deleted_count}, inserted {len(result.inserted_ids)}")
        for doc, inserted_id in zip(docs, result.inserted_ids):
            doc["_id"] = inserted_id
        return [self._to_read(doc) for doc in docs]

    async def create_movie(self, movie_data: MovieCreate, creator_id: str) -> MovieRead:
        """
        Inserts a new movie owned by `creator_id`.

        Raises:
            InvalidMovieDataError: If the store rejects the document.
            PyMongoError: If a database error occurs.
        """
        now = datetime.now(timezone.utc)
        doc = movie_data.model_dump()
        doc.update({"userId": creator_id, "reviews": [], "createdAt": now, "updatedAt": now})

        try:
            result = await self.collection.insert_one(doc)
        except WriteError as e:
            logger.warning(f"Movie rejected by the database: {e}")
            raise InvalidMovieDataError("Invalid movie data")
        except PyMongoError as e:
            logger.error(f"Database error creating movie: {e}", exc_info=True)
            raise

        await self._invalidate_cache()
        doc["_id"] = result.inserted_id
        logger.info(f"Movie created: {result.inserted_id} ('{doc['name']}') by user {creator_id}")
        return self._to_read(doc)

    async def update_movie(self, movie_id: str, movie_data: MovieUpdate) -> MovieRead:
        """
        Sparse update: a field is written only when the incoming value is
        truthy (lists whenever present). `rate` and `numberOfReviews` may be
        overwritten here even though reviews also derive them.

        Raises:
            MovieNotFoundError: If the movie does not exist.
            PyMongoError: If a database error occurs.
        """
        incoming = movie_data.model_dump()
        changes = {field: incoming[field] for field in UPDATABLE_FIELDS if is_supplied(incoming[field])}
        changes["updatedAt"] = datetime.now(timezone.utc)

        try:
            doc = await self._find_or_raise(movie_id)
            updated = await self.collection.find_one_and_update(
                {"_id": doc["_id"]},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except WriteError as e:
            logger.warning(f"Movie update rejected by the database: {e}")
            raise InvalidMovieDataError("Invalid movie data")
        except PyMongoError as e:
            logger.error(f"Database error updating movie {movie_id}: {e}", exc_info=True)
            raise
        if updated is None:
            raise MovieNotFoundError("Movie not found")

        await self._invalidate_cache()
        logger.info(f"Movie updated: {movie_id} (fields: {sorted(changes)})")
        return self._to_read(updated)

    async def delete_movie(self, movie_id: str) -> None:
        """
        Raises:
            MovieNotFoundError: If the movie does not exist.
        """
        try:
            doc = await self._find_or_raise(movie_id)
            await self.collection.delete_one({"_id": doc["_id"]})
        except PyMongoError as e:
            logger.error(f"Database error deleting movie {movie_id}: {e}", exc_info=True)
            raise

        await self._invalidate_cache()
        logger.info(f"Movie removed: {movie_id}")

    async def delete_all_movies(self) -> int:
        """Removes every movie and returns how many were deleted."""
        try:
            result = await self.collection.delete_many({})
        except PyMongoError as e:
            logger.error(f"Database error deleting all movies: {e}", exc_info=True)
            raise

        await self._invalidate_cache()
        logger.info(f"All movies removed ({result.deleted_count})")
        return result.deleted_count

    # --- Reviews ---

    async def add_review(self, movie_id: str, user: UserRead, review_data: ReviewCreate) -> None:
        """
        Appends a review by `user` and recomputes `numberOfReviews` and `rate`.

        The write only applies while the review list still has the length that
        was read. Reviews are append-only, so an unchanged length means an
        unchanged list and the duplicate check and the average still hold. A
        lost race re-reads the movie and checks again.

        Raises:
            MovieNotFoundError: If the movie does not exist.
            DuplicateReviewError: If `user` already reviewed this movie.
            ReviewWriteConflictError: If every write attempt lost a race.
            PyMongoError: If a database error occurs.
        """
        for attempt in range(1, MAX_REVIEW_WRITE_ATTEMPTS + 1):
            try:
                doc = await self._find_or_raise(movie_id)
                reviews = doc.get("reviews") or []
                if any(str(r.get("userId")) == user.id for r in reviews):
                    logger.warning(f"User {user.id} already reviewed movie {movie_id}")
                    raise DuplicateReviewError("You already reviewed this movie")

                now = datetime.now(timezone.utc)
                review = {
                    "userName": user.fullName,
                    "userId": user.id,
                    "userImage": user.image,
                    "rating": float(review_data.rating),
                    "comment": review_data.comment,
                    "createdAt": now,
                }
                ratings = [r["rating"] for r in reviews] + [review["rating"]]

                if "reviews" in doc:
                    guard = {"_id": doc["_id"], "reviews": {"$size": len(reviews)}}
                else:
                    guard = {"_id": doc["_id"], "reviews": {"$exists": False}}
                result = await self.collection.update_one(
                    guard,
                    {
                        "$push": {"reviews": review},
                        "$set": {
                            "numberOfReviews": len(ratings),
                            "rate": sum(ratings) / len(ratings),
                            "updatedAt": now,
                        },
                    },
                )
            except PyMongoError as e:
                logger.error(f"Database error adding review to movie {movie_id}: {e}", exc_info=True)
                raise

            if result.modified_count == 1:
                await self._invalidate_cache()
                logger.info(f"Review added to movie {movie_id} by user {user.id} (rating {review['rating']})")
                return
            logger.warning(f"Movie {movie_id} changed while adding a review (attempt {attempt}), retrying")

        raise ReviewWriteConflictError("Movie is being reviewed concurrently, please try again")

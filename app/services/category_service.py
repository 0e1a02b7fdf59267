# backend/app/services/category_service.py

import logging
from datetime import datetime, timezone
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.data_access.redis_client import CacheRepository, CATEGORIES_CACHE_KEY
from app.models.category import CategoryRead
from app.utils.helpers import to_object_id

logger = logging.getLogger(__name__)

class CategoryNotFoundError(Exception):
    """Raised when a category id does not resolve."""
    pass

class CategoryService:
    def __init__(self, db: AsyncIOMotorDatabase, cache: Optional[CacheRepository] = None):
        """
        Initializes the Category Service.

        Args:
            db: An instance of AsyncIOMotorDatabase (Motor client).
            cache: Optional cache for the category list; None disables caching.
        """
        self.db = db
        self.cache = cache
        self.collection = db["categories"]

    async def _invalidate_cache(self):
        if self.cache is not None:
            await self.cache.bump_version(CATEGORIES_CACHE_KEY)

    async def _find_or_raise(self, category_id: str) -> dict:
        obj_id = to_object_id(category_id)
        if obj_id is None:
            raise CategoryNotFoundError("Category not found")
        doc = await self.collection.find_one({"_id": obj_id})
        if doc is None:
            logger.warning(f"Category with ID {category_id} not found in database.")
            raise CategoryNotFoundError("Category not found")
        return doc

    async def get_categories(self) -> List[CategoryRead]:
        """
        Returns every category, unfiltered and unpaginated.

        Raises:
            PyMongoError: If a database error occurs.
        """
        # Generation is read before the database so a concurrent write makes this fill unreachable
        version = await self.cache.current_version(CATEGORIES_CACHE_KEY) if self.cache is not None else None
        if version is not None:
            cached = await self.cache.get(CacheRepository.versioned_key(CATEGORIES_CACHE_KEY, version))
            if isinstance(cached, list):
                return [CategoryRead.model_validate(item) for item in cached]

        try:
            docs = await self.collection.find({}).to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Database error while fetching categories: {e}", exc_info=True)
            raise

        categories = [CategoryRead(id=str(doc["_id"]), **doc) for doc in docs]
        if version is not None:
            await self.cache.set(
                CacheRepository.versioned_key(CATEGORIES_CACHE_KEY, version),
                [c.model_dump(mode="json") for c in categories],
                ttl_seconds=settings.CACHE_TTL_CATEGORIES,
            )
        return categories

    async def create_category(self, title: str) -> CategoryRead:
        """Inserts a new category. Titles are not required to be unique."""
        now = datetime.now(timezone.utc)
        doc = {"title": title, "createdAt": now, "updatedAt": now}
        try:
            result = await self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Database error creating category '{title}': {e}", exc_info=True)
            raise

        await self._invalidate_cache()
        logger.info(f"Category created: {result.inserted_id} ('{title}')")
        return CategoryRead(id=str(result.inserted_id), **doc)

    async def update_category(self, category_id: str, title: Optional[str]) -> CategoryRead:
        """
        Updates a category's title. A missing or empty title keeps the stored value.

        Raises:
            CategoryNotFoundError: If no category has this id.
            PyMongoError: If a database error occurs.
        """
        try:
            doc = await self._find_or_raise(category_id)
            changes = {"title": title or doc["title"], "updatedAt": datetime.now(timezone.utc)}
            updated = await self.collection.find_one_and_update(
                {"_id": doc["_id"]},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Database error updating category {category_id}: {e}", exc_info=True)
            raise
        if updated is None:
            raise CategoryNotFoundError("Category not found")

        await self._invalidate_cache()
        logger.info(f"Category updated: {category_id}")
        return CategoryRead(id=str(updated["_id"]), **updated)

    async def delete_category(self, category_id: str) -> None:
        """
        Removes a category. Movies referencing its title are left untouched.

        Raises:
            CategoryNotFoundError: If no category has this id.
        """
        try:
            doc = await self._find_or_raise(category_id)
            await self.collection.delete_one({"_id": doc["_id"]})
        except PyMongoError as e:
            logger.error(f"Database error deleting category {category_id}: {e}", exc_info=True)
            raise

        await self._invalidate_cache()
        logger.info(f"Category removed: {category_id}")

# FastAPI dependencies (e.g., get_db, get_current_user)
# backend/app/api/deps.py

import logging
from typing import AsyncGenerator, Optional

import redis.asyncio as redis
from fastapi import Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from redis.exceptions import RedisError
from pymongo.errors import ConfigurationError, ConnectionFailure, PyMongoError

from app.core.config import settings
from app.core.security import (
    CredentialsException,
    InsufficientPermissionsException,
    get_current_user_id,
)
from app.data_access.redis_client import CacheRepository
from app.models.user import UserRead
from app.utils.helpers import to_object_id

logger = logging.getLogger(__name__)

# --- Global Clients (managed by the lifespan in app.server) ---

mongo_client: Optional[AsyncIOMotorClient] = None
db_instance: Optional[AsyncIOMotorDatabase] = None
redis_client: Optional[redis.Redis] = None

async def initialize_connections():
    """
    Initializes MongoDB and, when configured, Redis connections.
    Called during FastAPI startup.
    """
    global mongo_client, db_instance, redis_client
    logger.info("Initializing external connections...")

    # --- MongoDB Initialization ---
    try:
        mongo_client = AsyncIOMotorClient(settings.MONGODB_URI.get_secret_value())
        # Ping the server to verify connection early
        await mongo_client.admin.command('ping')

        try:
            db_name = mongo_client.get_default_database().name
        except ConfigurationError:
            db_name = settings.MONGODB_DB_NAME
        db_instance = mongo_client[db_name]
        logger.info(f"MongoDB client initialized successfully. Using database: '{db_name}'")

    except ConnectionFailure as e:
        logger.error(f"MongoDB connection failed during initialization: {e}", exc_info=True)
        mongo_client = None
        db_instance = None
    except PyMongoError as e:
        logger.error(f"Unexpected error initializing MongoDB client: {e}", exc_info=True)
        mongo_client = None
        db_instance = None

    # --- Redis Initialization ---
    if settings.REDIS_URL is None:
        logger.info("REDIS_URL not set, caching disabled.")
        return
    try:
        redis_client = redis.from_url(
            settings.REDIS_URL.get_secret_value(),
            encoding="utf-8",
            decode_responses=True,
        )
        await redis_client.ping()
        logger.info("Redis client initialized successfully.")
    except RedisError as e:
        logger.error(f"Redis connection failed during initialization, caching disabled: {e}", exc_info=True)
        redis_client = None

async def close_connections():
    """
    Closes MongoDB and Redis connections.
    Called during FastAPI shutdown.
    """
    global mongo_client, db_instance, redis_client
    logger.info("Closing external connections...")
    if mongo_client:
        mongo_client.close()
        mongo_client = None
        db_instance = None
        logger.info("MongoDB client closed.")
    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis client closed.")


# --- Database Dependency ---

async def get_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    FastAPI dependency that yields the application's MongoDB database instance.

    Raises:
        HTTPException 503: If the database instance is not available.
    """
    if db_instance is None:
        logger.critical("MongoDB database instance is not available. Check initialization.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database service not available.",
        )
    yield db_instance


# --- Cache Dependency ---

async def get_cache() -> Optional[CacheRepository]:
    """
    FastAPI dependency that returns a CacheRepository, or None when Redis is
    not configured or unreachable. Callers must treat None as "no cache".
    """
    if redis_client is None:
        return None
    return CacheRepository(redis_client)


# --- Authentication Dependencies ---

async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> UserRead:
    """
    Resolves the token subject to a user profile from the `users` collection.

    Raises:
        CredentialsException: If the subject is not a known user.
    """
    obj_id = to_object_id(user_id)
    query = {"_id": obj_id} if obj_id is not None else {"_id": user_id}
    user = await db["users"].find_one(query)
    if user is None:
        logger.warning(f"Authenticated user ID {user_id} not found in database.")
        raise CredentialsException(detail="Not authorized, user not found")
    return UserRead(id=str(user["_id"]), **user)


async def get_current_admin(
    user: UserRead = Depends(get_current_user),
) -> UserRead:
    """
    Dependency for catalog management routes.

    Raises:
        InsufficientPermissionsException: If the user is not an admin.
    """
    if not user.isAdmin:
        logger.warning(f"User {user.id} attempted an admin action.")
        raise InsufficientPermissionsException()
    return user

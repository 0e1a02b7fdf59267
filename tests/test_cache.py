import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.data_access.redis_client import CacheRepository, CATEGORIES_CACHE_KEY
from app.models.movie import ReviewCreate
from app.models.user import UserRead
from app.services.category_service import CategoryService
from app.services.movie_service import MovieService
from tests.factories import make_movie


class InMemoryRedis:
    """Just enough of redis.asyncio.Redis for CacheRepository."""

    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.before_set = None

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self.before_set is not None:
            hook, self.before_set = self.before_set, None
            await hook()
        self.store[key] = value
        self.ttls[key] = ex

    async def incr(self, key):
        self.store[key] = int(self.store.get(key, 0)) + 1
        return self.store[key]


class BrokenRedis:
    async def get(self, key):
        raise RedisConnectionError("redis down")

    async def set(self, key, value, ex=None):
        raise RedisConnectionError("redis down")

    async def incr(self, key):
        raise RedisConnectionError("redis down")


@pytest.fixture
def redis_client():
    return InMemoryRedis()


@pytest.fixture
def cache(redis_client):
    return CacheRepository(redis_client)


async def test_round_trips_json(cache, redis_client):
    assert await cache.set("k", [{"a": 1}], ttl_seconds=30)

    assert await cache.get("k") == [{"a": 1}]
    assert redis_client.ttls["k"] == 30


async def test_miss_returns_none(cache):
    assert await cache.get("missing") is None


async def test_bump_version_moves_to_next_generation(cache):
    assert await cache.current_version("k") == 0

    await cache.bump_version("k")

    assert await cache.current_version("k") == 1
    assert cache.versioned_key("k", 1) == "k:v1"


async def test_redis_errors_degrade_to_miss():
    cache = CacheRepository(BrokenRedis())

    assert await cache.get("k") is None
    assert await cache.set("k", [1]) is False
    assert await cache.current_version("k") is None
    assert await cache.bump_version("k") is False


async def test_service_runs_uncached_when_redis_is_down(db):
    service = CategoryService(db=db, cache=CacheRepository(BrokenRedis()))
    await service.create_category("Action")

    assert [c.title for c in await service.get_categories()] == ["Action"]


async def test_category_list_is_cached_and_invalidated(db, cache, redis_client):
    service = CategoryService(db=db, cache=cache)
    await service.create_category("Action")
    version = await cache.current_version(CATEGORIES_CACHE_KEY)

    await service.get_categories()
    assert cache.versioned_key(CATEGORIES_CACHE_KEY, version) in redis_client.store

    await service.create_category("Drama")
    assert await cache.current_version(CATEGORIES_CACHE_KEY) == version + 1
    assert {c.title for c in await service.get_categories()} == {"Action", "Drama"}


async def test_cached_categories_are_served_from_cache(db, cache):
    service = CategoryService(db=db, cache=cache)
    await service.create_category("Action")
    await service.get_categories()

    # bypass the service so the cache is not invalidated
    await db["categories"].delete_many({})

    assert [c.title for c in await service.get_categories()] == ["Action"]


async def test_review_invalidates_top_rated(db, cache):
    service = MovieService(db=db, cache=cache)
    result = await db["movies"].insert_one(make_movie(name="Only"))
    await service.get_top_rated_movies()

    await service.add_review(str(result.inserted_id), UserRead(id="u1"), ReviewCreate(rating=4, comment="ok"))

    (movie,) = await service.get_top_rated_movies()
    assert movie.rate == 4


async def test_write_during_fill_does_not_leave_stale_top_rated(db, cache, redis_client):
    service = MovieService(db=db, cache=cache)
    result = await db["movies"].insert_one(make_movie(name="Only"))
    movie_id = str(result.inserted_id)

    async def review_lands_mid_fill():
        await service.add_review(movie_id, UserRead(id="u1"), ReviewCreate(rating=9, comment="late"))

    redis_client.before_set = review_lands_mid_fill

    (stale,) = await service.get_top_rated_movies()
    assert stale.rate == 0

    (movie,) = await service.get_top_rated_movies()
    assert movie.rate == 9


async def test_write_during_fill_does_not_leave_stale_categories(db, cache, redis_client):
    service = CategoryService(db=db, cache=cache)
    await service.create_category("Action")

    async def category_added_mid_fill():
        await service.create_category("Drama")

    redis_client.before_set = category_added_mid_fill

    assert [c.title for c in await service.get_categories()] == ["Action"]
    assert {c.title for c in await service.get_categories()} == {"Action", "Drama"}

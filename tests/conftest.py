"""
Shared fixtures: an in-memory Motor database and a TestClient wired to it.
"""
import asyncio

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.api.deps import get_cache, get_db
from app.core.security import create_access_token
from app.server import app


@pytest.fixture
def db():
    return AsyncMongoMockClient()["streamflix_test"]


@pytest.fixture
def admin_user(db):
    doc = {"_id": ObjectId(), "fullName": "Ada Admin", "image": "ada.png", "isAdmin": True}
    asyncio.run(db["users"].insert_one(doc))
    return doc


@pytest.fixture
def regular_user(db):
    doc = {"_id": ObjectId(), "fullName": "Rex Viewer", "image": "rex.png", "isAdmin": False}
    asyncio.run(db["users"].insert_one(doc))
    return doc


@pytest.fixture
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {create_access_token(str(admin_user['_id']))}"}


@pytest.fixture
def user_headers(regular_user):
    return {"Authorization": f"Bearer {create_access_token(str(regular_user['_id']))}"}


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_cache] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()

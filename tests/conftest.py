import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from projectdesk.core.config import Settings
from projectdesk.db.mongodb import DataBase, ensure_indexes
from projectdesk.main import create_app


def run(coro):
    """Runs a Motor coroutine against the in-memory store from sync test code."""
    return asyncio.run(coro)


@pytest.fixture
def database():
    client = AsyncMongoMockClient()
    database = DataBase(client=client, db=client["projectdesk_test"])
    run(ensure_indexes(database))
    return database


@pytest.fixture
def app(database):
    settings = Settings(MONGODB_URL="mongodb://localhost:27017/projectdesk_test", LOG_LEVEL="WARNING")
    return create_app(settings=settings, database=database)


@pytest.fixture
def client(app):
    return TestClient(app)


def make_user(client, name, email):
    r = client.post("/api/users", json={"name": name, "email": email})
    assert r.status_code == 201, r.text
    return r.json()


def auth(user):
    return {"X-User-Id": user["_id"]}


@pytest.fixture
def alice(client):
    return make_user(client, "Alice", "alice@example.com")


@pytest.fixture
def bob(client):
    return make_user(client, "Bob", "bob@example.com")


@pytest.fixture
def carol(client):
    return make_user(client, "Carol", "carol@example.com")

import logging

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from taskboard.db import MongoConnection
from taskboard.main import create_app
from taskboard.settings import Settings


def make_settings(**overrides) -> Settings:
    values = dict(
        mongodb_url="mongodb://localhost:27017/taskboard_test",
        mongodb_db_name="taskboard_test",
        mongodb_timeout_ms=100,
        health_timeout_ms=200,
        host="127.0.0.1",
        port=4000,
        log_level=logging.INFO,
        cors_allow_origins=["*"],
    )
    values.update(overrides)
    return Settings(**values)


def unreachable_client(*args, **kwargs):
    raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")


class FlakyClient:
    """A mongomock client whose server can be switched off and back on."""

    def __init__(self, url, **options):
        self._inner = mongomock.MongoClient(url)
        self.reachable = True
        self.close_calls = 0

    @property
    def admin(self):
        return self

    def command(self, name, *args, **kwargs):
        if not self.reachable:
            raise ServerSelectionTimeoutError("localhost:27017: timed out")
        return self._inner.admin.command(name)

    def get_default_database(self, default=None):
        return self._inner.get_default_database(default=default)

    def close(self):
        self.close_calls += 1
        self._inner.close()


@pytest.fixture
def app():
    return create_app(make_settings(), client_factory=mongomock.MongoClient)


@pytest.fixture
def client(app):
    # Entering the context runs the lifespan, which opens the connection.
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def offline_app():
    return create_app(make_settings(), client_factory=unreachable_client)


@pytest.fixture
def offline_client(offline_app):
    with TestClient(offline_app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def connection():
    conn = MongoConnection("mongodb://localhost:27017", "taskboard_test", client_factory=mongomock.MongoClient)
    conn.connect()
    yield conn
    conn.close()

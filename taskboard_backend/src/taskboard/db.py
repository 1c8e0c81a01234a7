from __future__ import annotations

import logging
from enum import Enum
from threading import RLock
from typing import Any, Callable, Dict, Optional

import pymongo
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .errors import PersistenceError

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Any]


# PUBLIC_INTERFACE
class ReadyState(str, Enum):
    """Connectivity status of the persistence adapter."""

    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"
    DISCONNECTED = "disconnected"


# PUBLIC_INTERFACE
class MongoConnection:
    """
    Owns the single MongoClient used by the application.

    The client is opened once by connect() at start-up and shared by all
    repositories. A failed connect() is logged and leaves the adapter in the
    'disconnected' state; the process keeps running and nothing reconnects.
    After start-up, check() pings the server to keep the readiness state in
    step with live connectivity (the driver itself reconnects transparently).

    Collections come from the database named in the URL, or db_name when the
    URL names none.
    """

    def __init__(
        self,
        url: str,
        db_name: str,
        options: Optional[Dict[str, Any]] = None,
        client_factory: ClientFactory = MongoClient,
        ping_timeout_ms: int = 1000,
    ) -> None:
        self._url = url
        self._db_name = db_name
        self._options = dict(options or {})
        self._client_factory = client_factory
        self._ping_timeout = ping_timeout_ms / 1000.0
        self._lock = RLock()
        self._client: Any = None
        self._database: Any = None
        self._state = ReadyState.DISCONNECTED

    @property
    def ready_state(self) -> ReadyState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ReadyState.CONNECTED

    @property
    def database_name(self) -> Optional[str]:
        return None if self._database is None else self._database.name

    def connect(self) -> None:
        with self._lock:
            if self._client is not None:
                return
            self._state = ReadyState.CONNECTING
            client = None
            try:
                client = self._client_factory(self._url, **self._options)
                client.admin.command("ping")
                database = client.get_default_database(default=self._db_name)
            except PyMongoError as exc:
                logger.error("Database connection error: %s", exc)
                if client is not None:
                    client.close()
                self._state = ReadyState.DISCONNECTED
                return
            self._client = client
            self._database = database
            self._state = ReadyState.CONNECTED
        logger.info("Database connection is open (db=%s)", database.name)

    def check(self) -> ReadyState:
        """
        Ping the server and update the readiness state. The ping is bounded
        by ping_timeout_ms so callers such as health checks stay fast.
        """
        with self._lock:
            client = self._client
            if client is None or self._state in (ReadyState.CONNECTING, ReadyState.DISCONNECTING):
                return self._state
        try:
            with pymongo.timeout(self._ping_timeout):
                client.admin.command("ping")
        except PyMongoError as exc:
            if self._state is ReadyState.CONNECTED:
                logger.error("Database connection lost: %s", exc)
            reachable = False
        else:
            if self._state is ReadyState.DISCONNECTED:
                logger.info("Database connection restored")
            reachable = True
        with self._lock:
            # close() may have run while the ping was in flight
            if self._client is client:
                self._state = ReadyState.CONNECTED if reachable else ReadyState.DISCONNECTED
            return self._state

    def close(self) -> None:
        with self._lock:
            if self._client is None:
                self._state = ReadyState.DISCONNECTED
                return
            self._state = ReadyState.DISCONNECTING
            try:
                self._client.close()
            finally:
                self._client = None
                self._database = None
                self._state = ReadyState.DISCONNECTED
        logger.info("Database connection closed")

    def collection(self, name: str) -> Collection:
        # Only a missing client fails fast; a server that went away surfaces
        # as a driver error from the operation itself.
        database = self._database
        if database is None:
            raise PersistenceError(f"database is {self._state.value}")
        return database[name]

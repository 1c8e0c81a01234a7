from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .db import MongoConnection
from .errors import NotFoundError, PersistenceError
from .models import LoginEntity, TaskEntity, UserEntity
from .schemas import LoginCreate, TaskCreate, TaskUpdate, UserCreate


def _parse_id(entity_id: Optional[str]) -> Optional[ObjectId]:
    """Return the ObjectId for a hex string, or None when absent or malformed."""
    if entity_id is None:
        return None
    try:
        return ObjectId(entity_id)
    except (InvalidId, TypeError):
        return None


def _to_entity(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = {k: v for k, v in doc.items() if k != "_id"}
    out["id"] = str(doc["_id"])
    return out


class _MongoRepository:
    """
    Shared plumbing for the collection-backed repositories: collection
    lookup through the injected connection, id parsing, and wrapping of
    driver errors into PersistenceError.
    """

    collection_name: str = ""

    def __init__(self, connection: MongoConnection) -> None:
        self._connection = connection

    @contextmanager
    def _collection(self) -> Iterator[Collection]:
        coll = self._connection.collection(self.collection_name)
        try:
            yield coll
        except PyMongoError as exc:
            raise PersistenceError(f"{self.collection_name}: {exc}") from exc

    def _insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        with self._collection() as coll:
            result = coll.insert_one(document)
        stored = dict(document)
        stored["_id"] = result.inserted_id
        return _to_entity(stored)

    def _find_by_id(self, entity_id: Optional[str]) -> Optional[Dict[str, Any]]:
        oid = _parse_id(entity_id)
        if oid is None:
            return None
        with self._collection() as coll:
            doc = coll.find_one({"_id": oid})
        return None if doc is None else _to_entity(doc)


# PUBLIC_INTERFACE
class UserRepository(_MongoRepository):
    """Users created at registration. Never updated or deleted."""

    collection_name = "users"

    def create(self, data: UserCreate) -> UserEntity:
        """Insert a new user document and return it with its generated id."""
        return self._insert(data.to_document())  # type: ignore[return-value]

    def get_by_id(self, user_id: Optional[str]) -> Optional[UserEntity]:
        """Return a user by id, or None if missing or malformed."""
        return self._find_by_id(user_id)  # type: ignore[return-value]


# PUBLIC_INTERFACE
class LoginRepository(_MongoRepository):
    """Credential records. No HTTP handler writes to this collection."""

    collection_name = "logins"

    def create(self, data: LoginCreate) -> LoginEntity:
        return self._insert(data.to_document())  # type: ignore[return-value]

    def get_by_id(self, login_id: Optional[str]) -> Optional[LoginEntity]:
        return self._find_by_id(login_id)  # type: ignore[return-value]

    def find_by_email(self, email: str) -> Optional[LoginEntity]:
        with self._collection() as coll:
            doc = coll.find_one({"email": email})
        return None if doc is None else _to_entity(doc)  # type: ignore[return-value]


# PUBLIC_INTERFACE
class TaskRepository(_MongoRepository):
    """
    Dashboard tasks.

    update_by_id and delete_by_id raise NotFoundError for a missing, absent
    or malformed id; callers do not validate ids beforehand.
    """

    collection_name = "tasks"

    def create(self, data: TaskCreate) -> TaskEntity:
        """Insert a new task. Tasks always start with completed=False."""
        document = data.to_document()
        document["completed"] = False
        return self._insert(document)  # type: ignore[return-value]

    def get_by_id(self, task_id: Optional[str]) -> Optional[TaskEntity]:
        return self._find_by_id(task_id)  # type: ignore[return-value]

    def list_all(self) -> List[TaskEntity]:
        """Return every task in insertion order."""
        with self._collection() as coll:
            docs = list(coll.find().sort("_id", 1))
        return [_to_entity(d) for d in docs]  # type: ignore[misc]

    def update_by_id(self, task_id: Optional[str], patch: TaskUpdate) -> TaskEntity:
        """Apply the explicitly set fields of patch and return the updated task."""
        oid = _parse_id(task_id)
        if oid is None:
            raise NotFoundError(self.collection_name, task_id)
        changes = patch.to_document()
        with self._collection() as coll:
            if changes:
                doc = coll.find_one_and_update(
                    {"_id": oid},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER,
                )
            else:
                doc = coll.find_one({"_id": oid})
        if doc is None:
            raise NotFoundError(self.collection_name, task_id)
        return _to_entity(doc)  # type: ignore[return-value]

    def delete_by_id(self, task_id: Optional[str]) -> None:
        oid = _parse_id(task_id)
        if oid is None:
            raise NotFoundError(self.collection_name, task_id)
        with self._collection() as coll:
            result = coll.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError(self.collection_name, task_id)


# PUBLIC_INTERFACE
def get_user_repository(request: Request) -> UserRepository:
    """Dependency returning the UserRepository owned by the running app."""
    return request.app.state.users


# PUBLIC_INTERFACE
def get_task_repository(request: Request) -> TaskRepository:
    """Dependency returning the TaskRepository owned by the running app."""
    return request.app.state.tasks

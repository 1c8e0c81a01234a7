from __future__ import annotations


class TaskboardError(Exception):
    """Base class for errors raised by the persistence and repository layers."""


class PersistenceError(TaskboardError):
    """The database is unreachable or rejected an operation."""


class NotFoundError(TaskboardError):
    """No document matches the given identifier (including malformed identifiers)."""

    def __init__(self, collection: str, entity_id: object) -> None:
        super().__init__(f"{collection}: no document with id {entity_id!r}")
        self.collection = collection
        self.entity_id = entity_id

"""Summary: Document store abstraction and in-memory implementation.

Importance: Keeps draft and report persistence independent of a backend.
Alternatives: Call a hosted document database SDK directly from services.
"""

from __future__ import annotations

import copy
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable

Filter = tuple[str, Any]


class PersistenceError(RuntimeError):
    """Summary: Raised when a store operation fails.

    Importance: Gives callers one error type regardless of backend.
    Alternatives: Let backend-specific exceptions escape.
    """


@dataclass(frozen=True)
class Document:
    """Summary: A stored document with its identifier.

    Importance: Pairs document IDs with data for query results.
    Alternatives: Embed the ID inside the data payload.
    """

    id: str
    data: dict[str, Any]


class DocumentStore(ABC):
    """Summary: Abstract async document store keyed by collection path.

    Importance: Lets services run against SQLite, memory, or a hosted store.
    Alternatives: Bind services to a single database driver.
    """

    @abstractmethod
    async def put(
        self,
        collection: str,
        document_id: str | None,
        data: dict[str, Any],
        merge: bool = False,
    ) -> str:
        """Summary: Create or upsert a document and return its ID.

        Importance: Single write path for creates and merge updates.
        Alternatives: Separate insert and update methods.
        """

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Document | None:
        """Summary: Read a single document by ID."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Iterable[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Document]:
        """Summary: Return documents matching all equality filters.

        Importance: Supports lookups by message ID and active flag.
        Alternatives: Load whole collections and filter in callers.
        """

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> None:
        """Summary: Delete a document; missing documents are ignored."""


def new_document_id() -> str:
    return uuid.uuid4().hex


class InMemoryDocumentStore(DocumentStore):
    """Summary: Dict-backed document store.

    Importance: Enables offline runs and fast, isolated tests.
    Alternatives: Run an emulator for the hosted store.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    async def put(
        self,
        collection: str,
        document_id: str | None,
        data: dict[str, Any],
        merge: bool = False,
    ) -> str:
        document_id = document_id or new_document_id()
        documents = self._collections.setdefault(collection, {})
        existing = documents.get(document_id)
        if merge and existing is not None:
            updated = dict(existing)
            updated.update(copy.deepcopy(data))
            documents[document_id] = updated
        else:
            documents[document_id] = copy.deepcopy(data)
        return document_id

    async def get(self, collection: str, document_id: str) -> Document | None:
        data = self._collections.get(collection, {}).get(document_id)
        if data is None:
            return None
        return Document(id=document_id, data=copy.deepcopy(data))

    async def query(
        self,
        collection: str,
        filters: Iterable[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Document]:
        filters = list(filters)
        matches = [
            Document(id=document_id, data=copy.deepcopy(data))
            for document_id, data in self._collections.get(collection, {}).items()
            if all(data.get(field) == value for field, value in filters)
        ]
        if order_by:
            # Missing fields sort like SQL NULLs: first ascending, last descending.
            matches.sort(
                key=lambda document: _sort_key(document.data.get(order_by)), reverse=descending
            )
        return matches

    async def delete(self, collection: str, document_id: str) -> None:
        self._collections.get(collection, {}).pop(document_id, None)


def _sort_key(value: Any) -> tuple[bool, Any]:
    return (value is not None, value)

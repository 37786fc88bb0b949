"""Summary: SQLite document store implementation for CreatorInbox.

Importance: Provides a local-first persistence layer for drafts and reports.
Alternatives: Use a hosted document database from day one.
"""

from __future__ import annotations

import asyncio
import json
import re
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator

from creatorinbox.storage.document_store import (
    Document,
    DocumentStore,
    Filter,
    PersistenceError,
    new_document_id,
)

_FIELD_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SqliteDocumentStore(DocumentStore):
    """Summary: SQLite-backed document store with JSON payloads.

    Importance: Enables local-first persistence with minimal dependencies.
    Alternatives: Use Postgres JSONB and SQLAlchemy.
    """

    def __init__(self, db_path: str) -> None:
        """Summary: Initialize the storage with a database path.

        Importance: Allows configurable database location per environment.
        Alternatives: Hardcode a default path in the class.
        """

        self._db_path = Path(db_path)

    def initialize(self) -> None:
        """Summary: Create tables if they do not exist.

        Importance: Ensures the database is ready before the first draft save.
        Alternatives: Run migrations using a dedicated migration tool.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    data TEXT NOT NULL,
                    PRIMARY KEY (collection, doc_id)
                )
                """
            )
            connection.commit()

    async def put(
        self,
        collection: str,
        document_id: str | None,
        data: dict[str, Any],
        merge: bool = False,
    ) -> str:
        document_id = document_id or new_document_id()
        await self._run(self._put, collection, document_id, data, merge)
        return document_id

    async def get(self, collection: str, document_id: str) -> Document | None:
        return await self._run(self._get, collection, document_id)

    async def query(
        self,
        collection: str,
        filters: Iterable[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Document]:
        return await self._run(self._query, collection, list(filters), order_by, descending)

    async def delete(self, collection: str, document_id: str) -> None:
        await self._run(self._delete, collection, document_id)

    async def _run(self, function: Any, *args: Any) -> Any:
        """Summary: Run a blocking SQLite call off the event loop.

        Importance: Keeps debounce timers for other drafts responsive.
        Alternatives: Use an async SQLite driver such as aiosqlite.
        """

        try:
            return await asyncio.to_thread(function, *args)
        except sqlite3.Error as exc:
            raise PersistenceError(f"SQLite operation failed: {exc}") from exc

    def _put(self, collection: str, document_id: str, data: dict[str, Any], merge: bool) -> None:
        with self._connection() as connection:
            cursor = connection.cursor()
            payload = dict(data)
            if merge:
                cursor.execute(
                    "SELECT data FROM documents WHERE collection = ? AND doc_id = ?",
                    (collection, document_id),
                )
                row = cursor.fetchone()
                if row:
                    payload = {**json.loads(row[0]), **data}
            cursor.execute(
                "INSERT OR REPLACE INTO documents (collection, doc_id, data) VALUES (?, ?, ?)",
                (collection, document_id, json.dumps(payload)),
            )
            connection.commit()

    def _get(self, collection: str, document_id: str) -> Document | None:
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                "SELECT doc_id, data FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, document_id),
            )
            row = cursor.fetchone()
        if not row:
            return None
        return Document(id=row[0], data=json.loads(row[1]))

    def _query(
        self,
        collection: str,
        filters: list[Filter],
        order_by: str | None,
        descending: bool,
    ) -> list[Document]:
        clauses = ["collection = ?"]
        params: list[Any] = [collection]
        for field, value in filters:
            clauses.append(f"json_extract(data, '$.{_checked_field(field)}') = ?")
            params.append(value)
        sql = f"SELECT doc_id, data FROM documents WHERE {' AND '.join(clauses)}"
        if order_by:
            direction = "DESC" if descending else "ASC"
            sql += f" ORDER BY json_extract(data, '$.{_checked_field(order_by)}') {direction}"
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(sql, params)
            rows = cursor.fetchall()
        return [Document(id=row[0], data=json.loads(row[1])) for row in rows]

    def _delete(self, collection: str, document_id: str) -> None:
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                (collection, document_id),
            )
            connection.commit()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Summary: Context manager for SQLite connections.

        Importance: Ensures connections are closed cleanly after use.
        Alternatives: Keep a single long-lived connection.
        """

        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
        finally:
            connection.close()


def _checked_field(field: str) -> str:
    if not _FIELD_PATTERN.match(field):
        raise PersistenceError(f"Unsupported field name: {field}")
    return field


def default_store_path() -> str:
    """Summary: Provide the default database path.

    Importance: Centralizes the default storage location.
    Alternatives: Compute the path based on OS user directories.
    """

    return "creatorinbox.db"

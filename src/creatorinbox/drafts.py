"""Summary: Auto-save lifecycle for AI-assisted reply drafts.

Importance: Persists work in progress during rapid edits without a write per keystroke.
Alternatives: Save on every edit, or only when the composer is closed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from creatorinbox.clock import utc_now
from creatorinbox.models import (
    Draft,
    DraftClearResult,
    DraftHistoryResult,
    DraftPurgeResult,
    DraftRestoreResult,
    DraftSaveResult,
)
from creatorinbox.storage.document_store import DocumentStore, PersistenceError


logger = logging.getLogger(__name__)

DRAFT_TTL = timedelta(days=7)
DEFAULT_DEBOUNCE_MS = 5000
PENDING_DRAFT_ID = "pending"
CANCELLED_ERROR = "Draft save cancelled"

DraftKey = tuple[str, str]


def drafts_collection(conversation_id: str) -> str:
    return f"conversations/{conversation_id}/message_drafts"


@dataclass
class _PendingSave:
    """Armed debounce timer and the latest text waiting to be committed."""

    handle: asyncio.TimerHandle
    draft_text: str
    confidence: float
    version: int
    waiters: list[asyncio.Future] = field(default_factory=list)


class DraftLifecycleManager:
    """Summary: Saves, restores, versions, and clears reply drafts.

    Importance: Keeps one active draft per message while retaining version history.
    Alternatives: Store a single mutable draft per message with no history.

    Each (conversation_id, message_id) key has at most one armed timer. Arming a
    key again cancels the previous timer; callers still awaiting the cancelled
    save receive the result of the commit that replaced it.
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or utc_now
        self._pending: dict[DraftKey, _PendingSave] = {}
        self._in_flight: set[asyncio.Task] = set()

    async def save_draft(
        self,
        conversation_id: str,
        message_id: str,
        draft_text: str,
        confidence: float,
        version: int,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> DraftSaveResult:
        """Summary: Schedule a debounced save of the draft text.

        Importance: Coalesces rapid edits into a single write.
        Alternatives: Queue every edit and write them in order.

        With ``debounce_ms == 0`` the commit is scheduled and the call returns
        ``draft_id="pending"`` without waiting for the write.
        """

        loop = asyncio.get_running_loop()
        key = (conversation_id, message_id)
        waiters: list[asyncio.Future] = []
        previous = self._pending.pop(key, None)
        if previous:
            previous.handle.cancel()
            waiters.extend(previous.waiters)

        delay = max(0, debounce_ms) / 1000
        handle = loop.call_later(delay, self._fire, key)
        pending = _PendingSave(
            handle=handle,
            draft_text=draft_text,
            confidence=confidence,
            version=version,
            waiters=waiters,
        )
        self._pending[key] = pending

        if debounce_ms <= 0:
            return DraftSaveResult(success=True, draft_id=PENDING_DRAFT_ID)

        waiter = loop.create_future()
        pending.waiters.append(waiter)
        return await waiter

    async def restore_draft(self, conversation_id: str, message_id: str) -> DraftRestoreResult:
        """Summary: Return the most recent active draft for a message.

        Importance: Lets the composer pick up where the creator left off.
        Alternatives: Restore the highest version regardless of active flag.
        """

        try:
            documents = await self._store.query(
                drafts_collection(conversation_id),
                [("messageId", message_id), ("isActive", True)],
                order_by="createdAt",
                descending=True,
            )
        except PersistenceError as exc:
            logger.error("Error restoring draft for message %s: %s", message_id, exc)
            return DraftRestoreResult(success=False, error=str(exc))
        if not documents:
            return DraftRestoreResult(success=True, draft=None)
        document = documents[0]
        return DraftRestoreResult(success=True, draft=Draft.from_document(document.id, document.data))

    async def get_draft_history(self, conversation_id: str, message_id: str) -> DraftHistoryResult:
        """Summary: List every draft version for a message, oldest first.

        Importance: Supports choosing the next version number and reviewing edits.
        Alternatives: Keep only the latest draft.
        """

        try:
            documents = await self._store.query(
                drafts_collection(conversation_id),
                [("messageId", message_id)],
                order_by="version",
            )
        except PersistenceError as exc:
            logger.error("Error getting draft history for message %s: %s", message_id, exc)
            return DraftHistoryResult(success=False, error=str(exc))
        drafts = [Draft.from_document(document.id, document.data) for document in documents]
        return DraftHistoryResult(success=True, drafts=drafts)

    async def clear_drafts(self, conversation_id: str, message_id: str) -> DraftClearResult:
        """Summary: Delete every draft version for a message.

        Importance: Cleans up after the reply is sent or discarded.
        Alternatives: Leave drafts for the TTL sweeper to remove.
        """

        # Must run before the deletes so an armed timer cannot write the draft back.
        self.cancel_debounced_save(conversation_id, message_id)
        collection = drafts_collection(conversation_id)
        try:
            documents = await self._store.query(collection, [("messageId", message_id)])
            await asyncio.gather(
                *(self._store.delete(collection, document.id) for document in documents)
            )
        except PersistenceError as exc:
            logger.error("Error clearing drafts for message %s: %s", message_id, exc)
            return DraftClearResult(success=False, error=str(exc))
        logger.info("Cleared %s drafts for message %s.", len(documents), message_id)
        return DraftClearResult(success=True)

    def cancel_debounced_save(self, conversation_id: str, message_id: str) -> None:
        """Summary: Cancel an armed save without writing anything.

        Importance: Lets the composer abandon edits safely.
        Alternatives: Let the save fire and delete it afterwards.
        """

        pending = self._pending.pop((conversation_id, message_id), None)
        if not pending:
            return
        pending.handle.cancel()
        _resolve(pending.waiters, DraftSaveResult(success=False, error=CANCELLED_ERROR))
        logger.debug("Cancelled pending draft save for message %s.", message_id)

    async def purge_expired_drafts(self, conversation_id: str) -> DraftPurgeResult:
        """Summary: Delete drafts in a conversation whose TTL has passed.

        Importance: Honors the seven-day retention contract from a sweeper job.
        Alternatives: Rely on a native TTL policy in the hosted store.

        Documents without ``expiresAt`` fall back to ``createdAt`` plus the TTL;
        documents with neither are left alone.
        """

        collection = drafts_collection(conversation_id)
        now = self._clock()
        try:
            documents = await self._store.query(collection)
            expired = [document for document in documents if _is_expired(document.data, now)]
            await asyncio.gather(
                *(self._store.delete(collection, document.id) for document in expired)
            )
        except PersistenceError as exc:
            logger.error("Error purging drafts in conversation %s: %s", conversation_id, exc)
            return DraftPurgeResult(success=False, error=str(exc))
        if expired:
            logger.info("Purged %s expired drafts in conversation %s.", len(expired), conversation_id)
        return DraftPurgeResult(success=True, purged=len(expired))

    def pending_keys(self) -> list[DraftKey]:
        return list(self._pending)

    async def flush(self) -> None:
        """Summary: Commit every armed save now and wait for in-flight writes.

        Importance: Avoids losing edits when the process shuts down.
        Alternatives: Drop pending saves on shutdown.
        """

        for key in list(self._pending):
            pending = self._pending.get(key)
            if pending:
                pending.handle.cancel()
                self._fire(key)
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    def _fire(self, key: DraftKey) -> None:
        pending = self._pending.pop(key, None)
        if not pending:
            return
        conversation_id, message_id = key
        task = asyncio.get_running_loop().create_task(
            self._commit(
                conversation_id,
                message_id,
                pending.draft_text,
                pending.confidence,
                pending.version,
            )
        )
        self._in_flight.add(task)
        waiters = pending.waiters
        task.add_done_callback(lambda done: self._settle(done, waiters))

    def _settle(self, task: asyncio.Task, waiters: list[asyncio.Future]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            result = DraftSaveResult(success=False, error=CANCELLED_ERROR)
        elif task.exception() is not None:
            exc = task.exception()
            logger.error("Unexpected error committing draft: %s", exc, exc_info=exc)
            result = DraftSaveResult(success=False, error=str(exc))
        else:
            result = task.result()
        _resolve(waiters, result)

    async def _commit(
        self,
        conversation_id: str,
        message_id: str,
        draft_text: str,
        confidence: float,
        version: int,
    ) -> DraftSaveResult:
        # Deactivate-then-write is not atomic; one writer per key is assumed.
        try:
            await self._deactivate_previous_drafts(conversation_id, message_id)
            now = self._clock()
            draft_id = f"draft_{message_id}_v{version}_{int(now.timestamp() * 1000)}"
            draft = Draft(
                id=draft_id,
                conversation_id=conversation_id,
                message_id=message_id,
                draft_text=draft_text,
                confidence=confidence,
                version=version,
                is_active=True,
                created_at=now,
                updated_at=now,
                expires_at=now + DRAFT_TTL,
            )
            await self._store.put(drafts_collection(conversation_id), draft_id, draft.to_document())
        except PersistenceError as exc:
            logger.error("Error saving draft for message %s: %s", message_id, exc)
            return DraftSaveResult(success=False, error=str(exc))
        logger.info("Saved draft %s (v%s) for message %s.", draft_id, version, message_id)
        return DraftSaveResult(success=True, draft_id=draft_id)

    async def _deactivate_previous_drafts(self, conversation_id: str, message_id: str) -> None:
        collection = drafts_collection(conversation_id)
        try:
            documents = await self._store.query(
                collection, [("messageId", message_id), ("isActive", True)]
            )
            await asyncio.gather(
                *(
                    self._store.put(collection, document.id, {"isActive": False}, merge=True)
                    for document in documents
                )
            )
        except PersistenceError as exc:
            # Best effort: the new draft is still written.
            logger.warning("Error deactivating previous drafts for message %s: %s", message_id, exc)


def _is_expired(data: dict, now: datetime) -> bool:
    if data.get("expiresAt"):
        return datetime.fromisoformat(data["expiresAt"]) <= now
    if data.get("createdAt"):
        return datetime.fromisoformat(data["createdAt"]) + DRAFT_TTL <= now
    return False


def _resolve(waiters: list[asyncio.Future], result: DraftSaveResult) -> None:
    for waiter in waiters:
        if not waiter.done():
            waiter.set_result(result)

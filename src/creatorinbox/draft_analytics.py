"""Summary: Draft edit analytics for AI-assisted replies.

Importance: Measures how much creators rewrite AI drafts before sending them.
Alternatives: Ship drafts without any feedback loop on their quality.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from creatorinbox.capacity import InvalidArgumentError
from creatorinbox.capacity_reports import week_boundaries
from creatorinbox.clock import utc_now
from creatorinbox.models import DraftEditEvent, EditRateMetrics, TrackingResult
from creatorinbox.storage.document_store import DocumentStore, PersistenceError


logger = logging.getLogger(__name__)

PERIODS = ("daily", "weekly", "monthly")
AGGREGATE_PERIOD = "all_time"
AGGREGATE_DOCUMENT_ID = "aggregate"


def edit_events_collection(user_id: str) -> str:
    return f"users/{user_id}/draft_edit_events"


def draft_metrics_collection(user_id: str) -> str:
    return f"users/{user_id}/draft_metrics"


def period_start(period: str, now: datetime) -> datetime:
    """Summary: Return the start of the daily, weekly, or monthly period containing `now`.

    Importance: Anchors "this week" metrics to the same Sunday start as capacity reports.
    Alternatives: Use a rolling window ending now.
    """

    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "daily":
        return midnight
    if period == "weekly":
        return week_boundaries(now)[0]
    if period == "monthly":
        return midnight.replace(day=1)
    raise InvalidArgumentError(f"period must be one of {', '.join(PERIODS)}")


def summarize_events(
    events: list[dict[str, Any]],
    period: str,
    start: datetime | None,
    end: datetime | None,
) -> EditRateMetrics:
    """Summary: Aggregate stored edit events into rate metrics.

    Importance: Single place for the zero-safe rate and average math.
    Alternatives: Let callers compute ratios from raw counts.
    """

    total_drafts = len(events)
    drafts_edited = 0
    total_edit_count = 0
    total_time_to_edit = 0
    overrides_applied = 0
    for event in events:
        if event.get("wasEdited"):
            drafts_edited += 1
            total_edit_count += int(event.get("editCount") or 0)
            total_time_to_edit += int(event.get("timeToEdit") or 0)
        if event.get("overrideApplied"):
            overrides_applied += 1

    return EditRateMetrics(
        period=period,
        period_start=start,
        period_end=end,
        total_drafts=total_drafts,
        drafts_edited=drafts_edited,
        edit_rate=drafts_edited / total_drafts if total_drafts else 0.0,
        average_edit_count=total_edit_count / drafts_edited if drafts_edited else 0.0,
        average_time_to_edit_ms=total_time_to_edit / drafts_edited if drafts_edited else 0.0,
        overrides_applied=overrides_applied,
        override_rate=overrides_applied / total_drafts if total_drafts else 0.0,
    )


class DraftAnalyticsService:
    """Summary: Records draft edit events and reports edit-rate metrics.

    Importance: Tells creators and the drafting model how often drafts need rework.
    Alternatives: Export raw events to an external analytics tool.
    """

    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] | None = None) -> None:
        self._store = store
        self._clock = clock or utc_now

    async def track_edit_event(self, user_id: str, event: DraftEditEvent) -> TrackingResult:
        """Summary: Store one edit event and fold it into the running aggregate.

        Importance: Captures edit behavior at send time.
        Alternatives: Reconstruct edits from draft version history.
        """

        if not user_id:
            return TrackingResult(success=False, error="User ID is required")
        if event.edit_count < 0 or event.time_to_edit_ms < 0:
            return TrackingResult(
                success=False, error="edit_count and time_to_edit_ms must be non-negative"
            )
        try:
            await self._store.put(
                edit_events_collection(user_id),
                None,
                {
                    "userId": user_id,
                    "messageId": event.message_id,
                    "conversationId": event.conversation_id,
                    "wasEdited": event.was_edited,
                    "editCount": event.edit_count,
                    "timeToEdit": event.time_to_edit_ms,
                    "requiresEditing": event.requires_editing,
                    "overrideApplied": event.override_applied,
                    "confidence": event.confidence,
                    "draftVersion": event.draft_version,
                    "timestamp": self._clock().isoformat(),
                },
            )
        except PersistenceError as exc:
            logger.error("Error tracking edit event for message %s: %s", event.message_id, exc)
            return TrackingResult(success=False, error=str(exc))
        await self._update_aggregate(user_id, event)
        logger.info("Tracked draft edit event for message %s.", event.message_id)
        return TrackingResult(success=True)

    async def calculate_edit_rate_metrics(
        self,
        user_id: str,
        period: str,
        start: datetime | None = None,
    ) -> EditRateMetrics:
        """Summary: Compute edit-rate metrics from events in the current period.

        Importance: Backs the daily, weekly, and monthly analytics views.
        Alternatives: Read only the all-time aggregate.

        Store failures are logged and reported as empty metrics.
        """

        now = self._clock()
        start = start or period_start(period, now)
        if period not in PERIODS:
            raise InvalidArgumentError(f"period must be one of {', '.join(PERIODS)}")
        if start > now:
            raise InvalidArgumentError("start must not be in the future")
        try:
            documents = await self._store.query(
                edit_events_collection(user_id), order_by="timestamp"
            )
        except PersistenceError as exc:
            logger.error("Error calculating edit rate metrics for %s: %s", user_id, exc)
            return EditRateMetrics(period=period, period_start=start, period_end=now)
        events = [
            document.data
            for document in documents
            if document.data.get("timestamp")
            and start <= datetime.fromisoformat(document.data["timestamp"]) <= now
        ]
        return summarize_events(events, period, start, now)

    async def get_aggregate_metrics(self, user_id: str) -> EditRateMetrics | None:
        """Summary: Return the all-time running aggregate, or None before any event."""

        try:
            document = await self._store.get(
                draft_metrics_collection(user_id), AGGREGATE_DOCUMENT_ID
            )
        except PersistenceError as exc:
            logger.error("Error getting aggregate draft metrics for %s: %s", user_id, exc)
            return None
        if document is None:
            return None
        data = document.data
        updated_at = data.get("updatedAt")
        return EditRateMetrics(
            period=AGGREGATE_PERIOD,
            period_start=None,
            period_end=datetime.fromisoformat(updated_at) if updated_at else None,
            total_drafts=int(data.get("totalDrafts", 0)),
            drafts_edited=int(data.get("draftsEdited", 0)),
            edit_rate=float(data.get("editRate", 0.0)),
            average_edit_count=float(data.get("averageEditCount", 0.0)),
            average_time_to_edit_ms=float(data.get("averageTimeToEdit", 0.0)),
            overrides_applied=int(data.get("overridesApplied", 0)),
            override_rate=float(data.get("overrideRate", 0.0)),
        )

    async def _update_aggregate(self, user_id: str, event: DraftEditEvent) -> None:
        collection = draft_metrics_collection(user_id)
        try:
            current = await self._store.get(collection, AGGREGATE_DOCUMENT_ID)
            data = current.data if current else {}
            previous_edited = int(data.get("draftsEdited", 0))
            total_drafts = int(data.get("totalDrafts", 0)) + 1
            drafts_edited = previous_edited + (1 if event.was_edited else 0)
            overrides_applied = int(data.get("overridesApplied", 0)) + (
                1 if event.override_applied else 0
            )
            average_edit_count = float(data.get("averageEditCount", 0.0))
            average_time_to_edit = float(data.get("averageTimeToEdit", 0.0))
            if event.was_edited:
                average_edit_count = (
                    average_edit_count * previous_edited + event.edit_count
                ) / drafts_edited
                average_time_to_edit = (
                    average_time_to_edit * previous_edited + event.time_to_edit_ms
                ) / drafts_edited
            await self._store.put(
                collection,
                AGGREGATE_DOCUMENT_ID,
                {
                    "totalDrafts": total_drafts,
                    "draftsEdited": drafts_edited,
                    "editRate": drafts_edited / total_drafts,
                    "averageEditCount": average_edit_count,
                    "averageTimeToEdit": average_time_to_edit,
                    "overridesApplied": overrides_applied,
                    "overrideRate": overrides_applied / total_drafts,
                    "updatedAt": self._clock().isoformat(),
                },
                merge=True,
            )
        except PersistenceError as exc:
            # Best effort: the event itself is already stored.
            logger.warning("Error updating aggregate draft metrics for %s: %s", user_id, exc)

"""Summary: Domain model dataclasses for CreatorInbox.

Importance: Defines the core entities shared across services and storage.
Alternatives: Use Pydantic models or ORM classes directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True)
class MessageDistribution:
    """Summary: Breakdown of a day's messages into triage buckets.

    Importance: Drives the daily digest and the capacity settings preview.
    Alternatives: Return a plain dict keyed by bucket name.
    """

    deep: int
    faq: int
    archived: int

    def as_dict(self) -> dict[str, int]:
        return {"deep": self.deep, "faq": self.faq, "archived": self.archived}


@dataclass(frozen=True)
class Draft:
    """Summary: One saved snapshot of an AI-assisted reply in progress.

    Importance: Lets creators leave a conversation without losing edits.
    Alternatives: Keep drafts only in client memory.
    """

    id: str
    conversation_id: str
    message_id: str
    draft_text: str
    confidence: float
    version: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    expires_at: datetime

    def to_document(self) -> dict[str, Any]:
        """Summary: Serialize the draft into its stored document shape.

        Importance: Keeps the persisted field names stable across stores.
        Alternatives: Store the dataclass with pickle.
        """

        return {
            "messageId": self.message_id,
            "conversationId": self.conversation_id,
            "draftText": self.draft_text,
            "confidence": self.confidence,
            "version": self.version,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
        }

    @staticmethod
    def from_document(document_id: str, data: dict[str, Any]) -> "Draft":
        """Summary: Rebuild a draft from a stored document.

        Importance: Restores typed drafts for callers of restore and history.
        Alternatives: Hand raw documents back to callers.
        """

        created_at = datetime.fromisoformat(data["createdAt"])
        return Draft(
            id=document_id,
            conversation_id=data["conversationId"],
            message_id=data["messageId"],
            draft_text=data["draftText"],
            confidence=data["confidence"],
            version=int(data["version"]),
            is_active=bool(data["isActive"]),
            created_at=created_at,
            updated_at=datetime.fromisoformat(data.get("updatedAt") or data["createdAt"]),
            expires_at=datetime.fromisoformat(data["expiresAt"]),
        )


@dataclass(frozen=True)
class DraftSaveResult:
    """Summary: Outcome of a draft save request.

    Importance: Lets the composer branch on failure without try/except.
    Alternatives: Raise exceptions on every failed autosave.
    """

    success: bool
    draft_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class DraftRestoreResult:
    """Summary: Outcome of restoring the active draft."""

    success: bool
    draft: Draft | None = None
    error: str | None = None


@dataclass(frozen=True)
class DraftHistoryResult:
    """Summary: Outcome of listing every draft version for a message."""

    success: bool
    drafts: list[Draft] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class DraftClearResult:
    """Summary: Outcome of clearing drafts after send or discard."""

    success: bool
    error: str | None = None


@dataclass(frozen=True)
class DraftPurgeResult:
    """Summary: Outcome of deleting expired drafts in a conversation."""

    success: bool
    purged: int = 0
    error: str | None = None


@dataclass(frozen=True)
class DraftEditEvent:
    """Summary: How a creator handled one AI draft before sending it.

    Importance: Raw signal for edit-rate analytics and draft quality tuning.
    Alternatives: Only count sent drafts without edit details.
    """

    message_id: str
    conversation_id: str
    was_edited: bool
    edit_count: int
    time_to_edit_ms: int
    requires_editing: bool
    override_applied: bool
    confidence: float
    draft_version: int


@dataclass(frozen=True)
class EditRateMetrics:
    """Summary: Draft editing behavior aggregated over a period.

    Importance: Shows how often creators accept AI drafts unchanged.
    Alternatives: Report raw event counts only.

    Averages cover edited drafts only; rates cover every draft.
    """

    period: str
    period_start: datetime | None
    period_end: datetime | None
    total_drafts: int = 0
    drafts_edited: int = 0
    edit_rate: float = 0.0
    average_edit_count: float = 0.0
    average_time_to_edit_ms: float = 0.0
    overrides_applied: int = 0
    override_rate: float = 0.0


@dataclass(frozen=True)
class TrackingResult:
    """Summary: Outcome of recording a draft edit event."""

    success: bool
    error: str | None = None


@dataclass(frozen=True)
class DigestDay:
    """Summary: Triage counts recorded by one daily agent run.

    Importance: Feeds weekly capacity reports with real usage.
    Alternatives: Recount archived and FAQ messages each week.
    """

    day: date
    deep: int
    faq: int
    archived: int

    @property
    def total(self) -> int:
        return self.deep + self.faq + self.archived


@dataclass(frozen=True)
class CapacityMetrics:
    """Summary: Aggregated capacity usage for a week.

    Importance: Quantifies whether the configured capacity fits reality.
    Alternatives: Show raw daily counts without aggregation.
    """

    capacity_set: int
    avg_daily_usage: float
    usage_rate: float
    total_deep: int
    total_faq: int
    total_archived: int


@dataclass(frozen=True)
class CapacitySuggestion:
    """Summary: A recommended capacity adjustment with its reason.

    Importance: Turns weekly metrics into an actionable change.
    Alternatives: Leave interpretation of metrics to the creator.
    """

    reason: str
    priority: str
    adjust_capacity: int | None = None


@dataclass(frozen=True)
class CapacityReport:
    """Summary: Weekly capacity report for a creator.

    Importance: Persists metrics and suggestions for later review.
    Alternatives: Compute reports on demand and never store them.
    """

    id: str
    user_id: str
    week_start: datetime
    week_end: datetime
    metrics: CapacityMetrics
    suggestions: list[CapacitySuggestion]
    created_at: datetime


@dataclass(frozen=True)
class ScoredMessage:
    """Summary: An unprocessed message with its relationship score.

    Importance: Unit of work for capacity-aware digest selection.
    Alternatives: Pass full message records through the workflow.
    """

    id: str
    conversation_id: str
    score: float
    category: str | None = None
    is_vip: bool = False
    sentiment_score: float | None = None


@dataclass(frozen=True)
class QuietHours:
    """Summary: Daily window where automatic replies are held back."""

    enabled: bool
    start: str
    end: str

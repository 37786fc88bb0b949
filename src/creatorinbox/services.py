"""Summary: Core application services for CreatorInbox.

Importance: Orchestrates capacity planning, digest recording, and weekly reports.
Alternatives: Build a full service layer with dependency injection framework.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable

from creatorinbox.archive import ArchivePlan, plan_auto_archive
from creatorinbox.capacity import (
    InvalidArgumentError,
    average_daily_messages,
    calculate_time_commitment,
    preview_distribution,
    suggest_capacity,
)
from creatorinbox.capacity_reports import (
    calculate_weekly_metrics,
    generate_suggestions,
    week_boundaries,
)
from creatorinbox.clock import utc_now
from creatorinbox.models import (
    CapacityReport,
    CapacitySuggestion,
    DigestDay,
    MessageDistribution,
    ScoredMessage,
)
from creatorinbox.storage.document_store import DocumentStore, new_document_id


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapacityPlanner:
    """Summary: Applies capacity settings to daily message volume.

    Importance: Gives the settings screen and the daily agent one source of triage math.
    Alternatives: Call the capacity functions directly from each caller.
    """

    daily_limit: int
    faq_rate: float

    def suggest(self, message_count: int, days: int = 30) -> dict[str, int]:
        """Summary: Suggest a capacity from a trailing message count.

        Importance: Onboards creators with a sustainable default.
        Alternatives: Use the configured daily limit for everyone.
        """

        average = average_daily_messages(message_count, days)
        capacity = suggest_capacity(average)
        return {
            "average_daily_messages": average,
            "suggested_capacity": capacity,
            "time_commitment_minutes": calculate_time_commitment(capacity),
        }

    def preview(
        self,
        total_messages: int,
        capacity: int | None = None,
        faq_rate: float | None = None,
    ) -> MessageDistribution:
        capacity = self.daily_limit if capacity is None else capacity
        faq_rate = self.faq_rate if faq_rate is None else faq_rate
        return preview_distribution(capacity, total_messages, faq_rate)

    def triage(self, messages: Iterable[ScoredMessage], capacity: int | None = None) -> ArchivePlan:
        """Summary: Select the day's meaningful messages and the ones to archive.

        Importance: Applies capacity and archive protection in one step.
        Alternatives: Archive everything beyond capacity unconditionally.
        """

        plan = plan_auto_archive(messages, self.daily_limit if capacity is None else capacity)
        logger.info(
            "Triaged messages: %s meaningful, %s to archive, %s protected.",
            len(plan.meaningful),
            len(plan.to_archive),
            len(plan.protected),
        )
        return plan


@dataclass(frozen=True)
class CapacityReportService:
    """Summary: Records daily digests and builds weekly capacity reports.

    Importance: Closes the loop between configured capacity and actual usage.
    Alternatives: Compute reports from raw message history each week.
    """

    store: DocumentStore
    clock: Callable[[], datetime] = utc_now

    async def record_digest(self, user_id: str, digest: DigestDay) -> str:
        """Summary: Persist one day's triage counts.

        Importance: Feeds the weekly report with per-day usage.
        Alternatives: Store counts only inside the digest document.
        """

        if min(digest.deep, digest.faq, digest.archived) < 0:
            raise InvalidArgumentError("digest counts must be non-negative")
        document_id = await self.store.put(
            _digests_collection(user_id),
            digest.day.isoformat(),
            {
                "day": digest.day.isoformat(),
                "deep": digest.deep,
                "faq": digest.faq,
                "archived": digest.archived,
            },
        )
        logger.info("Recorded digest for %s on %s.", user_id, digest.day)
        return document_id

    async def list_digests(self, user_id: str, start: date, end: date) -> list[DigestDay]:
        documents = await self.store.query(_digests_collection(user_id), order_by="day")
        digests = [
            DigestDay(
                day=date.fromisoformat(document.data["day"]),
                deep=int(document.data["deep"]),
                faq=int(document.data["faq"]),
                archived=int(document.data["archived"]),
            )
            for document in documents
        ]
        return [digest for digest in digests if start <= digest.day <= end]

    async def build_weekly_report(self, user_id: str, capacity_set: int) -> CapacityReport:
        """Summary: Build and store the report for the current week.

        Importance: Gives creators a weekly prompt to revisit capacity.
        Alternatives: Only show metrics on demand without persistence.
        """

        now = self.clock()
        week_start, week_end = week_boundaries(now)
        digests = await self.list_digests(user_id, week_start.date(), week_end.date())
        metrics = calculate_weekly_metrics(digests, capacity_set)
        report = CapacityReport(
            id=new_document_id(),
            user_id=user_id,
            week_start=week_start,
            week_end=week_end,
            metrics=metrics,
            suggestions=generate_suggestions(metrics),
            created_at=now,
        )
        await self.store.put(
            f"users/{user_id}/capacity_reports", report.id, report_to_document(report)
        )
        logger.info("Generated capacity report %s for %s.", report.id, user_id)
        return report


def report_to_document(report: CapacityReport) -> dict[str, Any]:
    return {
        "userId": report.user_id,
        "weekStartDate": report.week_start.isoformat(),
        "weekEndDate": report.week_end.isoformat(),
        "metrics": {
            "capacitySet": report.metrics.capacity_set,
            "avgDailyUsage": report.metrics.avg_daily_usage,
            "usageRate": report.metrics.usage_rate,
            "totalDeep": report.metrics.total_deep,
            "totalFAQ": report.metrics.total_faq,
            "totalArchived": report.metrics.total_archived,
        },
        "suggestions": [_suggestion_to_document(item) for item in report.suggestions],
        "createdAt": report.created_at.isoformat(),
    }


def _suggestion_to_document(suggestion: CapacitySuggestion) -> dict[str, Any]:
    document: dict[str, Any] = {"reason": suggestion.reason, "priority": suggestion.priority}
    if suggestion.adjust_capacity is not None:
        document["adjustCapacity"] = suggestion.adjust_capacity
    return document


def _digests_collection(user_id: str) -> str:
    return f"users/{user_id}/digests"

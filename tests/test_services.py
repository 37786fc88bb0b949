"""Summary: Tests for capacity planning and weekly report services.

Importance: Ensures services apply configuration and persist reports.
Alternatives: Validate services only through the API.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from creatorinbox.capacity import InvalidArgumentError
from creatorinbox.clock import utc_now
from creatorinbox.models import DigestDay, ScoredMessage
from creatorinbox.services import CapacityPlanner, CapacityReportService
from creatorinbox.storage.document_store import InMemoryDocumentStore


def test_planner_preview_uses_configured_defaults() -> None:
    """Summary: Verify the planner falls back to configured capacity and rate.

    Importance: The daily agent passes only the day's volume.
    Alternatives: Require every caller to pass full settings.
    """

    planner = CapacityPlanner(daily_limit=10, faq_rate=0.15)
    assert planner.preview(50).as_dict() == {"deep": 10, "faq": 8, "archived": 32}
    assert planner.preview(20, capacity=15, faq_rate=0.25).as_dict() == {
        "deep": 15,
        "faq": 5,
        "archived": 0,
    }


def test_planner_suggest_from_message_history() -> None:
    planner = CapacityPlanner(daily_limit=10, faq_rate=0.15)
    assert planner.suggest(2400) == {
        "average_daily_messages": 80,
        "suggested_capacity": 14,
        "time_commitment_minutes": 28,
    }


def test_planner_triage_respects_limit() -> None:
    planner = CapacityPlanner(daily_limit=2, faq_rate=0.15)
    messages = [
        ScoredMessage(id=str(index), conversation_id="c", score=float(index)) for index in range(5)
    ]
    plan = planner.triage(messages)
    assert [message.id for message in plan.meaningful] == ["4", "3"]
    assert len(plan.to_archive) == 3


@pytest.mark.asyncio
async def test_weekly_report_uses_current_week_digests() -> None:
    """Summary: Verify reports aggregate only this week's digests and are stored.

    Importance: Older digests must not skew the weekly suggestion.
    Alternatives: Aggregate a rolling seven-day window.
    """

    store = InMemoryDocumentStore()
    service = CapacityReportService(
        store=store, clock=lambda: datetime(2026, 10, 16, 9, 0, tzinfo=timezone.utc)
    )
    await service.record_digest("creator-1", DigestDay(day=date(2026, 10, 5), deep=50, faq=0, archived=0))
    await service.record_digest("creator-1", DigestDay(day=date(2026, 10, 12), deep=8, faq=2, archived=10))
    await service.record_digest("creator-1", DigestDay(day=date(2026, 10, 13), deep=10, faq=3, archived=17))

    report = await service.build_weekly_report("creator-1", capacity_set=10)

    assert report.metrics.total_deep == 18
    assert report.metrics.avg_daily_usage == 25.0
    assert report.suggestions[0].priority == "high"
    stored = await store.get("users/creator-1/capacity_reports", report.id)
    assert stored is not None
    assert stored.data["metrics"]["totalArchived"] == 27
    assert stored.data["suggestions"][0]["adjustCapacity"] == 7


@pytest.mark.asyncio
async def test_record_digest_overwrites_same_day() -> None:
    service = CapacityReportService(store=InMemoryDocumentStore())
    day = date(2026, 10, 12)
    await service.record_digest("creator-1", DigestDay(day=day, deep=1, faq=1, archived=1))
    await service.record_digest("creator-1", DigestDay(day=day, deep=4, faq=0, archived=0))
    digests = await service.list_digests("creator-1", day, day)
    assert digests == [DigestDay(day=day, deep=4, faq=0, archived=0)]


@pytest.mark.asyncio
async def test_record_digest_rejects_negative_counts() -> None:
    service = CapacityReportService(store=InMemoryDocumentStore())
    with pytest.raises(InvalidArgumentError):
        await service.record_digest("creator-1", DigestDay(day=date(2026, 10, 12), deep=-1, faq=0, archived=0))


def test_services_share_the_utc_clock() -> None:
    service = CapacityReportService(store=InMemoryDocumentStore())
    assert service.clock is utc_now
    assert utc_now().utcoffset() == timedelta(0)

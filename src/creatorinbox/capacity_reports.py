"""Summary: Weekly capacity metrics and adjustment suggestions.

Importance: Tells creators whether their daily capacity matches real usage.
Alternatives: Show raw digest history and let creators judge.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from creatorinbox.capacity import MAX_CAPACITY, MIN_CAPACITY, round_half_up
from creatorinbox.models import CapacityMetrics, CapacitySuggestion, DigestDay

UNDER_USED_RATE = 0.5
OVER_CAPACITY_RATE = 0.9
HIGH_ARCHIVE_RATE = 0.6


def calculate_weekly_metrics(digests: Iterable[DigestDay], capacity_set: int) -> CapacityMetrics:
    """Summary: Aggregate a week of digests into usage metrics.

    Importance: Normalizes usage by days that actually had traffic.
    Alternatives: Divide by seven regardless of activity.
    """

    total_deep = total_faq = total_archived = 0
    days_with_data = 0
    for digest in digests:
        total_deep += digest.deep
        total_faq += digest.faq
        total_archived += digest.archived
        if digest.total > 0:
            days_with_data += 1

    total_messages = total_deep + total_faq + total_archived
    avg_daily_usage = total_messages / days_with_data if days_with_data else 0.0
    usage_rate = avg_daily_usage / capacity_set if capacity_set > 0 else 0.0
    return CapacityMetrics(
        capacity_set=capacity_set,
        avg_daily_usage=round_half_up(avg_daily_usage * 10) / 10,
        usage_rate=round_half_up(usage_rate * 100) / 100,
        total_deep=total_deep,
        total_faq=total_faq,
        total_archived=total_archived,
    )


def generate_suggestions(metrics: CapacityMetrics) -> list[CapacitySuggestion]:
    """Summary: Produce capacity adjustments from weekly metrics.

    Importance: Turns usage numbers into a concrete next step.
    Alternatives: Use an LLM to write free-form advice.
    """

    suggestions: list[CapacitySuggestion] = []
    usage_percent = round_half_up(metrics.usage_rate * 100)

    if metrics.usage_rate < UNDER_USED_RATE:
        suggested = max(MIN_CAPACITY, round_half_up(metrics.avg_daily_usage * 1.2))
        suggestions.append(
            CapacitySuggestion(
                adjust_capacity=suggested,
                reason=(
                    f"You're only using {usage_percent}% of your capacity. Lowering to "
                    f"{suggested} would reduce pressure while maintaining coverage."
                ),
                priority="medium",
            )
        )

    if metrics.usage_rate > OVER_CAPACITY_RATE:
        suggested = max(MIN_CAPACITY, metrics.capacity_set - 3)
        suggestions.append(
            CapacitySuggestion(
                adjust_capacity=suggested,
                reason=(
                    f"You're at {usage_percent}% capacity. Consider reducing to "
                    f"{suggested} for sustainability."
                ),
                priority="high",
            )
        )

    total = metrics.total_deep + metrics.total_faq + metrics.total_archived
    archive_rate = metrics.total_archived / total if total else 0.0
    if archive_rate > HIGH_ARCHIVE_RATE and metrics.capacity_set < MAX_CAPACITY:
        suggested = min(MAX_CAPACITY, metrics.capacity_set + 2)
        suggestions.append(
            CapacitySuggestion(
                adjust_capacity=suggested,
                reason=(
                    f"{round_half_up(archive_rate * 100)}% of messages are being archived. If you "
                    f"have bandwidth, consider increasing capacity to {suggested}."
                ),
                priority="low",
            )
        )

    if not suggestions:
        suggestions.append(
            CapacitySuggestion(
                reason="Your capacity settings look well-balanced. No adjustments needed.",
                priority="low",
            )
        )
    return suggestions


def week_boundaries(now: datetime) -> tuple[datetime, datetime]:
    """Summary: Return the Sunday-to-Saturday week containing `now`.

    Importance: Aligns reports with the weekly schedule that generates them.
    Alternatives: Use ISO weeks starting on Monday.
    """

    days_since_sunday = (now.weekday() + 1) % 7
    week_start = (now - timedelta(days=days_since_sunday)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    week_end = week_start + timedelta(days=6, hours=23, minutes=59, seconds=59, microseconds=999999)
    return week_start, week_end


def is_within_current_week(moment: datetime, now: datetime) -> bool:
    week_start, week_end = week_boundaries(now)
    return week_start <= moment <= week_end

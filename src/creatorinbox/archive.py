"""Summary: Auto-archive policy for messages beyond daily capacity.

Importance: Keeps the digest focused while protecting messages that must not be dropped.
Alternatives: Surface every message and let the creator archive manually.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from creatorinbox.capacity import InvalidArgumentError
from creatorinbox.models import QuietHours, ScoredMessage

PROTECTED_CATEGORIES = frozenset({"Business", "Urgent"})
CRISIS_SENTIMENT_THRESHOLD = -0.7

DEFAULT_BOUNDARY_MESSAGE = """Hi! I get hundreds of messages daily and can't personally respond to everyone.

For quick questions, check out my FAQ: {{faqUrl}}
For deeper connection, join my community: {{communityUrl}}

I read every message, but I focus on responding to those I can give thoughtful attention to. If this is time-sensitive, feel free to follow up and I'll prioritize it.

Thank you for understanding!

[This message was sent automatically]"""

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass(frozen=True)
class ArchivePlan:
    """Summary: Result of splitting a day's messages at the capacity limit.

    Importance: Separates what the creator sees from what gets auto-handled.
    Alternatives: Mutate message records in place during the workflow.
    """

    meaningful: list[ScoredMessage]
    to_archive: list[ScoredMessage]
    protected: list[ScoredMessage]


def split_by_capacity(
    messages: Iterable[ScoredMessage], daily_limit: int
) -> tuple[list[ScoredMessage], list[ScoredMessage]]:
    """Summary: Rank messages by score and cut at the daily limit.

    Importance: Implements capacity-aware selection for the daily digest.
    Alternatives: Select by recency instead of relationship score.
    """

    if daily_limit < 0:
        raise InvalidArgumentError(f"daily_limit must be non-negative, got {daily_limit}")
    ranked = sorted(messages, key=lambda message: message.score, reverse=True)
    return ranked[:daily_limit], ranked[daily_limit:]


def should_not_archive(message: ScoredMessage) -> bool:
    """Summary: Check whether a message is exempt from auto-archiving.

    Importance: Business, urgent, VIP, and crisis messages always reach the creator.
    Alternatives: Archive purely by score.
    """

    if message.category in PROTECTED_CATEGORIES:
        return True
    if message.is_vip:
        return True
    if message.sentiment_score is not None and message.sentiment_score < CRISIS_SENTIMENT_THRESHOLD:
        return True
    return False


def plan_auto_archive(messages: Iterable[ScoredMessage], daily_limit: int) -> ArchivePlan:
    meaningful, beyond = split_by_capacity(messages, daily_limit)
    to_archive = [message for message in beyond if not should_not_archive(message)]
    protected = [message for message in beyond if should_not_archive(message)]
    return ArchivePlan(meaningful=meaningful, to_archive=to_archive, protected=protected)


def render_boundary_message(
    template: str,
    creator_name: str | None = None,
    faq_url: str | None = None,
    community_url: str | None = None,
) -> str:
    """Summary: Fill in the boundary auto-reply template.

    Importance: Sends archived senders somewhere useful instead of silence.
    Alternatives: Use a templating engine such as Jinja2.
    """

    rendered = template.replace("{{creatorName}}", creator_name or "[Creator]")
    rendered = rendered.replace("{{faqUrl}}", faq_url or "[FAQ not configured]")
    return rendered.replace("{{communityUrl}}", community_url or "[Community not configured]")


def is_quiet_hours(quiet_hours: QuietHours | None, now: datetime) -> bool:
    """Summary: Check whether `now` falls inside the quiet-hours window.

    Importance: Holds back automatic boundary replies overnight.
    Alternatives: Send boundary replies immediately regardless of time.
    """

    if not quiet_hours or not quiet_hours.enabled:
        return False
    current = now.hour * 60 + now.minute
    start = _minutes(quiet_hours.start)
    end = _minutes(quiet_hours.end)
    if start > end:
        # Window wraps past midnight.
        return current >= start or current < end
    return start <= current < end


def _minutes(value: str) -> int:
    match = _TIME_PATTERN.match(value)
    if not match:
        raise InvalidArgumentError(f"Invalid time of day: {value}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidArgumentError(f"Invalid time of day: {value}")
    return hours * 60 + minutes

"""Summary: Shared time helpers for CreatorInbox services.

Importance: Gives drafts, reports, and analytics one notion of "now".
Alternatives: Call datetime.now in each module.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)

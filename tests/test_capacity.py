"""Summary: Tests for capacity suggestions and distribution previews.

Importance: Ensures the triage math matches the documented policy.
Alternatives: Validate capacity settings manually in the UI.
"""

from __future__ import annotations

import pytest

from creatorinbox.capacity import (
    MAX_CAPACITY,
    MIN_CAPACITY,
    InvalidArgumentError,
    average_daily_messages,
    calculate_time_commitment,
    preview_distribution,
    round_half_up,
    suggest_capacity,
)
from creatorinbox.models import MessageDistribution


@pytest.mark.parametrize(
    ("average", "expected"),
    [(30, 5), (80, 14), (200, MAX_CAPACITY), (0, MIN_CAPACITY), (-12, MIN_CAPACITY)],
)
def test_suggest_capacity_examples(average: float, expected: int) -> None:
    """Summary: Verify suggestions for known volumes.

    Importance: Pins the 18% share and the clamp bounds.
    Alternatives: Only test the clamp bounds.
    """

    assert suggest_capacity(average) == expected


def test_suggest_capacity_is_clamped_and_monotonic() -> None:
    """Summary: Verify suggestions stay in range and never decrease with volume.

    Importance: Guards against surprising suggestions for busier creators.
    Alternatives: Spot-check a handful of volumes.
    """

    previous = MIN_CAPACITY
    for volume in range(0, 400):
        suggested = suggest_capacity(volume / 2)
        assert MIN_CAPACITY <= suggested <= MAX_CAPACITY
        assert suggested >= previous
        previous = suggested


def test_round_half_up_rounds_halves_up() -> None:
    assert round_half_up(6.5) == 7
    assert round_half_up(7.5) == 8
    assert round_half_up(7.49) == 7


def test_time_commitment_is_two_minutes_per_reply() -> None:
    """Summary: Verify the linear time estimate.

    Importance: The settings screen shows this number to creators.
    Alternatives: Track real reply durations.
    """

    assert calculate_time_commitment(10) == 20
    assert calculate_time_commitment(20) == 40
    assert all(calculate_time_commitment(c) == c * 2 for c in range(0, 50))
    with pytest.raises(InvalidArgumentError):
        calculate_time_commitment(-1)


def test_preview_distribution_examples() -> None:
    """Summary: Verify distribution for documented scenarios.

    Importance: Confirms deep, FAQ, and archived counts match the daily agent.
    Alternatives: Compare against the agent output manually.
    """

    assert preview_distribution(10, 50, 0.15) == MessageDistribution(deep=10, faq=8, archived=32)
    assert preview_distribution(15, 20, 0.25) == MessageDistribution(deep=15, faq=5, archived=0)
    assert preview_distribution(10, 50) == MessageDistribution(deep=10, faq=8, archived=32)


def test_preview_distribution_caps_deep_at_total() -> None:
    """Summary: Verify deep attention never exceeds the day's volume.

    Importance: Small volumes must not report phantom replies.
    Alternatives: Report capacity as deep regardless of volume.
    """

    distribution = preview_distribution(20, 6, 0.5)
    assert distribution.deep == 6
    assert distribution.faq == 3
    assert distribution.archived == 0


def test_preview_distribution_is_non_negative() -> None:
    for capacity in (0, 5, 20):
        for total in (0, 1, 7, 50, 300):
            for rate in (0.0, 0.15, 0.5, 1.0):
                distribution = preview_distribution(capacity, total, rate)
                assert distribution.deep == min(capacity, total)
                assert distribution.faq >= 0
                assert distribution.archived >= 0


@pytest.mark.parametrize(
    ("capacity", "total", "rate"),
    [(-1, 10, 0.15), (5, -1, 0.15), (5, 10, -0.1), (5, 10, 1.5)],
)
def test_preview_distribution_rejects_invalid_input(capacity: int, total: int, rate: float) -> None:
    """Summary: Verify invalid inputs raise instead of producing negative buckets.

    Importance: Surfaces caller bugs early.
    Alternatives: Clamp inputs silently.
    """

    with pytest.raises(InvalidArgumentError):
        preview_distribution(capacity, total, rate)


def test_average_daily_messages() -> None:
    assert average_daily_messages(0) == 0
    assert average_daily_messages(450) == 15
    assert average_daily_messages(45, days=10) == 5
    with pytest.raises(InvalidArgumentError):
        average_daily_messages(10, days=0)

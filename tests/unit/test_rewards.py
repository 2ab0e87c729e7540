from __future__ import annotations

import pytest

from backend.app.insights.rewards import badge_for, compute_reward


@pytest.mark.parametrize(
    ("xp", "badge"),
    [
        (0, "Bronze"),
        (150, "Bronze"),
        (200, "Bronze"),
        (200.5, "Silver"),
        (500, "Silver"),
        (501, "Gold"),
        (10_000, "Gold"),
    ],
)
def test_badge_thresholds(xp: float, badge: str) -> None:
    assert badge_for(xp) == badge


def test_reward_xp_equals_total_minutes() -> None:
    reward = compute_reward(320.5)

    assert reward.xp == 320.5
    assert reward.badge == "Silver"

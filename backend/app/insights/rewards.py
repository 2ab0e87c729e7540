from __future__ import annotations

from dataclasses import dataclass

SILVER_THRESHOLD_XP = 200
GOLD_THRESHOLD_XP = 500


@dataclass(frozen=True)
class Reward:
    xp: float
    badge: str


def badge_for(xp: float) -> str:
    if xp > GOLD_THRESHOLD_XP:
        return "Gold"
    if xp > SILVER_THRESHOLD_XP:
        return "Silver"
    return "Bronze"


def compute_reward(total_minutes: float) -> Reward:
    """Lifetime minutes convert one-to-one into experience points."""

    xp = total_minutes
    return Reward(xp=xp, badge=badge_for(xp))

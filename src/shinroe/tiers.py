"""shinroe.tiers — Coarse reputation tiers derived from the composite score."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Tier(str, Enum):
    ELITE = "elite"
    EXCELLENT = "excellent"
    GOOD = "good"
    BUILDING = "building"
    AT_RISK = "at_risk"

    @property
    def min_score(self) -> int:
        return TIER_CONFIG[self].min_score

    @property
    def label(self) -> str:
        return TIER_CONFIG[self].label


@dataclass(frozen=True)
class TierInfo:
    label: str
    min_score: int
    color: str


# Ordered high to low; classification takes the first threshold met.
TIER_CONFIG: dict[Tier, TierInfo] = {
    Tier.ELITE: TierInfo("Elite", 850, "#7c60fd"),
    Tier.EXCELLENT: TierInfo("Excellent", 750, "#4be15a"),
    Tier.GOOD: TierInfo("Good", 650, "#feea46"),
    Tier.BUILDING: TierInfo("Building", 500, "#ff6d75"),
    Tier.AT_RISK: TierInfo("At Risk", 0, "#f72349"),
}

_ORDERED = sorted(TIER_CONFIG, key=lambda t: TIER_CONFIG[t].min_score, reverse=True)


def tier_from_score(score: int) -> Tier:
    """Classify a score in [0, 1000]. Callers guarantee the range."""
    for tier in _ORDERED:
        if score >= TIER_CONFIG[tier].min_score:
            return tier
    return Tier.AT_RISK


def points_to_next_tier(score: int) -> tuple[Optional[Tier], int]:
    """Next tier up and the points still needed; ``(None, 0)`` at the top."""
    current = tier_from_score(score)
    idx = _ORDERED.index(current)
    if idx == 0:
        return None, 0
    nxt = _ORDERED[idx - 1]
    return nxt, TIER_CONFIG[nxt].min_score - score

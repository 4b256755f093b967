"""
shinroe scoring — Composite reputation score from heterogeneous signals.

Overall score (0-1000):
  Base                 350
  Badges               per-type bonus (unknown types +20), +25 if verified
  Account age          +50 past 180 days, +50 more past 365 days
  Activity             each term capped independently:
                         transactions x2 (150), endorsement weight (100),
                         endorsements x10 (100), counterparties x2 (75),
                         on-chain days / 30 (75)
  Engagement           +50 flat
  Identity signals     KYC level x27, external account age / 9 (40),
                         email +20, phone +30, complete profile +30

Score = clamp(round(sum), 0, 1000), rounding half up.

Five category sub-scores (0-100 each) are computed by separate formulas
and do not feed the overall score.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, asdict
from typing import Iterable, Optional

from .badges import BadgeValue, badge_points, parse_badge
from .tiers import Tier, tier_from_score

logger = logging.getLogger(__name__)

BASE_SCORE = 350
MAX_SCORE = 1000
VERIFIED_BONUS = 25
ENGAGEMENT_BONUS = 50
MAX_KYC_LEVEL = 3


@dataclass(frozen=True)
class IdentitySignals:
    """Third-party identity verification signals."""
    kyc_level: int = 0  # 0-3
    account_age_days: int = 0
    verified_email: bool = False
    verified_phone: bool = False
    profile_complete: bool = False


@dataclass(frozen=True)
class UserSignals:
    """Inputs to scoring, assembled fresh per request by the caller.

    ``endorsement_weight`` is already decay-adjusted and expressed in whole
    tokens. Day counts are whole days.
    """
    is_verified: bool = False
    badge_types: frozenset = field(default_factory=frozenset)
    account_age_days: int = 0
    transaction_count: int = 0
    endorsement_weight: float = 0
    endorsement_count: int = 0
    unique_counterparties: int = 0
    on_chain_age_days: int = 0
    identity_signals: Optional[IdentitySignals] = None

    def __post_init__(self):
        badges = frozenset(parse_badge(b) for b in self.badge_types)
        object.__setattr__(self, "badge_types", badges)


@dataclass(frozen=True)
class ScoreBreakdown:
    overall: int  # 0-1000
    identity: int  # 0-100
    financial: int
    social: int
    transactional: int
    behavioral: int
    tier: Tier
    trend: int = 0  # caller supplied, change since last period

    def to_dict(self) -> dict:
        d = asdict(self)
        d["tier"] = self.tier.value
        return d


@dataclass(frozen=True)
class ScoreCategory:
    name: str
    key: str
    weight: int  # percent
    description: str


SCORE_CATEGORIES: list[ScoreCategory] = [
    ScoreCategory("Identity", "identity", 20, "Verified accounts and credentials"),
    ScoreCategory("Financial", "financial", 25, "Asset holdings and DeFi activity"),
    ScoreCategory("Social", "social", 20, "Community engagement and endorsements"),
    ScoreCategory("Transactional", "transactional", 25, "On-chain transaction history"),
    ScoreCategory("Behavioral", "behavioral", 10, "Wallet age and consistency"),
]


def _nonneg(value) -> float:
    return value if value > 0 else 0


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _kyc(identity: IdentitySignals) -> int:
    return min(max(int(identity.kyc_level), 0), MAX_KYC_LEVEL)


def _badge_bonus(badges: Iterable[BadgeValue]) -> int:
    return sum(badge_points(b) for b in badges)


def calculate_score(signals: UserSignals) -> int:
    """Composite score in [0, 1000]. Deterministic and side-effect free.

    Negative numeric fields are treated as zero and KYC levels are clamped
    to 0-3. Boundary validation in ``shinroe.schemas`` rejects such input
    before it gets here; the clamp keeps the range guarantee regardless.
    """
    score = float(BASE_SCORE)

    score += _badge_bonus(signals.badge_types)
    if signals.is_verified:
        score += VERIFIED_BONUS

    age = _nonneg(signals.account_age_days)
    if age > 180:
        score += 50
    if age > 365:
        score += 50

    score += min(_nonneg(signals.transaction_count) * 2, 150)
    score += min(_nonneg(signals.endorsement_weight), 100)
    score += min(_nonneg(signals.endorsement_count) * 10, 100)
    score += min(_nonneg(signals.unique_counterparties) * 2, 75)
    score += min(_nonneg(signals.on_chain_age_days), 75 * 30) / 30
    score += ENGAGEMENT_BONUS

    identity = signals.identity_signals
    if identity is not None:
        score += _kyc(identity) * 27
        score += min(_nonneg(identity.account_age_days), 40 * 9) / 9
        if identity.verified_email:
            score += 20
        if identity.verified_phone:
            score += 30
        if identity.profile_complete:
            score += 30

    return min(MAX_SCORE, max(0, _round_half_up(score)))


# ── Category sub-scores (0-100) ──

def _term(value) -> float:
    return min(_nonneg(value), 100)


def _cap(value: float) -> int:
    # Clamp before flooring; math.floor rejects inf.
    return int(math.floor(min(100, max(0, value))))


def identity_score(signals: UserSignals) -> int:
    score = len(signals.badge_types) * 15
    if signals.is_verified:
        score += 25
    identity = signals.identity_signals
    if identity is not None:
        score += _kyc(identity) * 13
        if identity.verified_email:
            score += 10
        if identity.verified_phone:
            score += 15
        if identity.profile_complete:
            score += 11
    return _cap(score)


def financial_score(signals: UserSignals) -> int:
    return _cap(_term(signals.endorsement_weight * 10) + _term(signals.transaction_count * 3))


def social_score(signals: UserSignals) -> int:
    # Same whole-token weight the overall score uses, scaled down by 100.
    weight = min(_nonneg(signals.endorsement_weight), 100 * 100)
    return _cap(_term(signals.endorsement_count * 10) + weight / 100)


def transactional_score(signals: UserSignals) -> int:
    return _cap(_term(signals.unique_counterparties * 4) + _term(signals.transaction_count * 2))


def behavioral_score(signals: UserSignals) -> int:
    return _cap(min(_nonneg(signals.on_chain_age_days), 100 * 3) // 3)


def calculate_breakdown(signals: UserSignals, trend: int = 0) -> ScoreBreakdown:
    """Overall score, tier and the five category sub-scores."""
    overall = calculate_score(signals)
    breakdown = ScoreBreakdown(
        overall=overall,
        identity=identity_score(signals),
        financial=financial_score(signals),
        social=social_score(signals),
        transactional=transactional_score(signals),
        behavioral=behavioral_score(signals),
        tier=tier_from_score(overall),
        trend=trend,
    )
    logger.debug("Computed score breakdown: overall=%d tier=%s", overall, breakdown.tier.value)
    return breakdown


def weighted_category_score(breakdown: ScoreBreakdown) -> float:
    """Category-weighted average of the sub-scores, 0-100."""
    total = sum(getattr(breakdown, c.key) * c.weight for c in SCORE_CATEGORIES)
    return round(total / sum(c.weight for c in SCORE_CATEGORIES), 1)


class ScoreCalculator:
    """Stateless facade over the scoring functions.

    Safe to share across threads; holds no mutable state.
    """

    def score(self, signals: UserSignals) -> int:
        return calculate_score(signals)

    def breakdown(self, signals: UserSignals, trend: int = 0) -> ScoreBreakdown:
        return calculate_breakdown(signals, trend=trend)

    def tier(self, signals: UserSignals) -> Tier:
        return tier_from_score(calculate_score(signals))

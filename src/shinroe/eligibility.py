"""
shinroe.eligibility — Badge predicates and airdrop criteria evaluation.

Two consumers share one discipline: every check is a pure function of its
inputs, reports human-readable reasons, and never mutates the criteria or
the user record.

Badges have fixed predicates (one per ``BadgeType``). Airdrops carry
declarative, immutable ``EligibilityCriteria`` checked in a fixed order:

    1. registration
    2. minimum score
    3. required badges   (``all``: one reason per missing badge;
                          ``any``: one combined reason, only if none owned)
    4. minimum endorsement weight

``eligible`` is true iff no reasons were collected.

Usage:
    criteria = EligibilityCriteria(
        min_score=700,
        required_badges=(BadgeType.VERIFIED_IDENTITY, BadgeType.EARLY_ADOPTER),
        badge_requirement=BadgeRequirement.ANY,
    )
    result = evaluate(criteria, UserAttributes(score=720, badges={BadgeType.EARLY_ADOPTER}))
    if result.eligible:
        # allow the claim
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from .badges import ALL_BADGE_TYPES, BadgeType, BadgeValue, badge_name, parse_badge, BADGE_METADATA
from .decay import SECONDS_PER_DAY, TOKEN_DECIMALS
from .tiers import TIER_CONFIG, Tier

TRUSTED_TRADER_ACTIVITIES = 50
COMMUNITY_BUILDER_ENDORSEMENTS = 10
ELITE_SCORE_THRESHOLD = TIER_CONFIG[Tier.ELITE].min_score
EARLY_ADOPTER_WINDOW_SECONDS = 30 * SECONDS_PER_DAY


# ─── Badge predicates ──────────────────────────────────────────────

@dataclass(frozen=True)
class BadgeContext:
    """User attributes the badge predicates read."""
    identity_linked: bool = False
    endorsements_given: int = 0  # active only
    endorsements_received: int = 0  # active only
    is_registered: bool = False
    registered_at: Optional[int] = None  # epoch seconds
    overall_score: int = 0


@dataclass(frozen=True)
class BadgeEligibility:
    badge: BadgeType
    eligible: bool
    reason: str
    progress: Optional[tuple[int, int]] = None  # (current, required)

    def to_dict(self) -> dict:
        d = {
            "badge": int(self.badge),
            "name": BADGE_METADATA[self.badge].name,
            "eligible": self.eligible,
            "reason": self.reason,
        }
        if self.progress is not None:
            d["progress"] = {"current": self.progress[0], "required": self.progress[1]}
        return d


def _threshold(badge: BadgeType, current: int, required: int,
               met: str, unit: str) -> BadgeEligibility:
    eligible = current >= required
    reason = met if eligible else f"{required - current} more {unit} needed"
    return BadgeEligibility(badge, eligible, reason, (current, required))


def _verified_identity(ctx: BadgeContext, now: float, cutoff: Optional[int]) -> BadgeEligibility:
    if ctx.identity_linked:
        return BadgeEligibility(BadgeType.VERIFIED_IDENTITY, True, "Identity account linked")
    return BadgeEligibility(BadgeType.VERIFIED_IDENTITY, False, "Link your identity account to earn")


def _trusted_trader(ctx: BadgeContext, now: float, cutoff: Optional[int]) -> BadgeEligibility:
    current = ctx.endorsements_given + ctx.endorsements_received
    return _threshold(BadgeType.TRUSTED_TRADER, current, TRUSTED_TRADER_ACTIVITIES,
                      "Activity threshold met", "activities")


def _community_builder(ctx: BadgeContext, now: float, cutoff: Optional[int]) -> BadgeEligibility:
    return _threshold(BadgeType.COMMUNITY_BUILDER, ctx.endorsements_given,
                      COMMUNITY_BUILDER_ENDORSEMENTS, "Endorsement threshold met", "endorsements")


def _early_adopter(ctx: BadgeContext, now: float, cutoff: Optional[int]) -> BadgeEligibility:
    if not ctx.is_registered:
        return BadgeEligibility(BadgeType.EARLY_ADOPTER, False, "Must be registered to qualify")
    # Without a fixed launch cutoff the window moves with ``now``, which
    # admits every registered user whose timestamp is not far in the future.
    if cutoff is None:
        cutoff = int(now) + EARLY_ADOPTER_WINDOW_SECONDS
    registered_at = ctx.registered_at if ctx.registered_at is not None else int(now)
    if registered_at < cutoff:
        return BadgeEligibility(BadgeType.EARLY_ADOPTER, True, "Early adopter status confirmed")
    return BadgeEligibility(BadgeType.EARLY_ADOPTER, False, "Registration was after early adopter window")


def _elite_score(ctx: BadgeContext, now: float, cutoff: Optional[int]) -> BadgeEligibility:
    score = ctx.overall_score
    eligible = score >= ELITE_SCORE_THRESHOLD
    reason = "Elite score achieved" if eligible else f"Need {ELITE_SCORE_THRESHOLD - score} more points"
    return BadgeEligibility(BadgeType.ELITE_SCORE, eligible, reason, (score, ELITE_SCORE_THRESHOLD))


BADGE_PREDICATES = {
    BadgeType.VERIFIED_IDENTITY: _verified_identity,
    BadgeType.TRUSTED_TRADER: _trusted_trader,
    BadgeType.COMMUNITY_BUILDER: _community_builder,
    BadgeType.EARLY_ADOPTER: _early_adopter,
    BadgeType.ELITE_SCORE: _elite_score,
}

if set(BADGE_PREDICATES) != set(BadgeType):
    raise RuntimeError("BADGE_PREDICATES must cover every BadgeType")


def check_badge(badge: BadgeType, ctx: BadgeContext, now: Optional[float] = None,
                early_adopter_cutoff: Optional[int] = None) -> BadgeEligibility:
    """Evaluate one badge predicate. Badges do not interact."""
    if now is None:
        now = time.time()
    return BADGE_PREDICATES[BadgeType(badge)](ctx, now, early_adopter_cutoff)


def check_all_badges(ctx: BadgeContext, now: Optional[float] = None,
                     early_adopter_cutoff: Optional[int] = None) -> list[BadgeEligibility]:
    if now is None:
        now = time.time()
    return [check_badge(b, ctx, now, early_adopter_cutoff) for b in ALL_BADGE_TYPES]


# ─── Airdrop criteria ──────────────────────────────────────────────

class BadgeRequirement(str, Enum):
    ANY = "any"
    ALL = "all"


@dataclass(frozen=True)
class EligibilityCriteria:
    """Fixed when the airdrop is created; never altered afterwards.

    ``min_endorsement_weight`` uses the same unit as
    ``UserAttributes.endorsement_weight`` (smallest token units).
    """
    min_score: int = 0
    required_badges: tuple = ()
    badge_requirement: BadgeRequirement = BadgeRequirement.ANY
    min_endorsement_weight: int = 0
    requires_registration: bool = False

    def __post_init__(self):
        object.__setattr__(self, "required_badges",
                           tuple(parse_badge(b) for b in self.required_badges))
        object.__setattr__(self, "badge_requirement", BadgeRequirement(self.badge_requirement))

    def to_dict(self) -> dict:
        return {
            "min_score": self.min_score,
            "required_badges": [int(b) for b in self.required_badges],
            "badge_requirement": self.badge_requirement.value,
            "min_endorsement_weight": self.min_endorsement_weight,
            "requires_registration": self.requires_registration,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EligibilityCriteria":
        return cls(
            min_score=data.get("min_score", 0),
            required_badges=tuple(data.get("required_badges", ())),
            badge_requirement=BadgeRequirement(data.get("badge_requirement", "any")),
            min_endorsement_weight=data.get("min_endorsement_weight", 0),
            requires_registration=data.get("requires_registration", False),
        )


@dataclass(frozen=True)
class UserAttributes:
    score: int = 0
    badges: frozenset = field(default_factory=frozenset)
    endorsement_weight: int = 0  # smallest token units
    is_registered: bool = False
    address: str = ""

    def __post_init__(self):
        object.__setattr__(self, "badges", frozenset(parse_badge(b) for b in self.badges))


@dataclass(frozen=True)
class EligibilityResult:
    """Decision plus the attributes it was made on, for auditability."""
    eligible: bool
    reasons: tuple
    user_score: int
    user_badges: tuple
    user_endorsement_weight: int
    is_registered: bool

    def to_dict(self) -> dict:
        return {
            "eligible": self.eligible,
            "reasons": list(self.reasons),
            "user_score": self.user_score,
            "user_badges": [int(b) for b in self.user_badges],
            "user_endorsement_weight": self.user_endorsement_weight,
            "is_registered": self.is_registered,
        }


def _badge_reasons(criteria: EligibilityCriteria, owned: frozenset) -> list[str]:
    required = criteria.required_badges
    if not required:
        return []
    if criteria.badge_requirement == BadgeRequirement.ALL:
        return [f"Missing badge: {badge_name(b)}" for b in required if b not in owned]
    if any(b in owned for b in required):
        return []
    return ["Missing badge: one of " + ", ".join(badge_name(b) for b in required)]


def evaluate(criteria: EligibilityCriteria, user: UserAttributes) -> EligibilityResult:
    """Check ``user`` against airdrop ``criteria``. Reason order is stable."""
    reasons: list[str] = []

    if criteria.requires_registration and not user.is_registered:
        reasons.append("Registration required")

    if criteria.min_score > 0 and user.score < criteria.min_score:
        reasons.append(f"Minimum score required: {criteria.min_score} (yours: {user.score})")

    reasons.extend(_badge_reasons(criteria, user.badges))

    if user.endorsement_weight < criteria.min_endorsement_weight:
        reasons.append("Insufficient endorsement weight")

    return EligibilityResult(
        eligible=not reasons,
        reasons=tuple(reasons),
        user_score=user.score,
        user_badges=tuple(sorted(user.badges)),
        user_endorsement_weight=user.endorsement_weight,
        is_registered=user.is_registered,
    )


def filter_eligible(criteria: EligibilityCriteria, users: Iterable[UserAttributes]) -> list[UserAttributes]:
    return [u for u in users if evaluate(criteria, u).eligible]


def count_eligible(criteria: EligibilityCriteria, users: Iterable[UserAttributes]) -> int:
    """How many of ``users`` an airdrop with ``criteria`` would admit."""
    return len(filter_eligible(criteria, users))


# ─── Checklist ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class ChecklistItem:
    label: str
    requirement: str
    current: Optional[str] = None
    passed: Optional[bool] = None  # None = not yet evaluated


def format_token_amount(amount: int, decimals: int = TOKEN_DECIMALS) -> str:
    value = (Decimal(int(amount)) / (Decimal(10) ** decimals)).normalize()
    return format(value, "f")


def build_checklist(criteria: EligibilityCriteria,
                    result: Optional[EligibilityResult] = None) -> list[ChecklistItem]:
    """One row per requirement; ``passed`` is None until a result is supplied."""
    items: list[ChecklistItem] = []

    if criteria.requires_registration:
        items.append(ChecklistItem(
            label="Registered User",
            requirement="Must be registered on-chain",
            current=None if result is None else ("Registered" if result.is_registered else "Not registered"),
            passed=None if result is None else result.is_registered,
        ))

    if criteria.min_score > 0:
        items.append(ChecklistItem(
            label="Minimum Score",
            requirement=f"Score {criteria.min_score}+",
            current=None if result is None else f"Your score: {result.user_score}",
            passed=None if result is None else result.user_score >= criteria.min_score,
        ))

    for badge in criteria.required_badges:
        requirement = BADGE_METADATA[badge].requirement if isinstance(badge, BadgeType) else "Required badge"
        items.append(ChecklistItem(
            label=badge_name(badge),
            requirement=requirement,
            passed=None if result is None else badge in result.user_badges,
        ))

    if criteria.min_endorsement_weight > 0:
        items.append(ChecklistItem(
            label="Endorsement Weight",
            requirement=f"Min {format_token_amount(criteria.min_endorsement_weight)} tokens",
            current=None if result is None else f"Your weight: {format_token_amount(result.user_endorsement_weight)} tokens",
            passed=None if result is None else result.user_endorsement_weight >= criteria.min_endorsement_weight,
        ))

    if not items:
        items.append(ChecklistItem(label="Open to Everyone", requirement="No special requirements", passed=True))

    return items

"""shinroe — Reputation scoring, tiers, score commitments and eligibility."""

from shinroe.badges import (
    BadgeType, BadgeInfo, BADGE_METADATA, ALL_BADGE_TYPES,
    badge_info, badge_name, badge_points, parse_badge,
)
from shinroe.decay import (
    EndorsementRecord, EndorsementType,
    decayed_weight, decay_percentage, months_old, total_decayed_weight,
)
from shinroe.tiers import Tier, TierInfo, TIER_CONFIG, tier_from_score, points_to_next_tier
from shinroe.scoring import (
    IdentitySignals, UserSignals, ScoreBreakdown, ScoreCalculator,
    SCORE_CATEGORIES, calculate_score, calculate_breakdown, weighted_category_score,
)
from shinroe.commitment import (
    CommitmentCodec, ClaimParams, SALT_VERSION,
    derive_salt, commit, verify, claim_params, is_valid_address, normalize_address,
)
from shinroe.attestation import OracleIdentity, ScoreAttestation, attest_score
from shinroe.eligibility import (
    BadgeContext, BadgeEligibility, check_badge, check_all_badges,
    BadgeRequirement, EligibilityCriteria, UserAttributes, EligibilityResult,
    ChecklistItem, evaluate, build_checklist, count_eligible, filter_eligible,
)
from shinroe.signals import (
    signals_from_indexer, endorsements_from_indexer, badge_context_from_indexer, attributes_from_indexer,
)
from shinroe.rate_limiter import (
    ApiKeyRateLimiter, InMemoryRateLimitStore, RateLimitStore, RateCheckResult, is_valid_api_key_format,
)
from shinroe.errors import ShinroeError, InvalidAddressError, SignalValidationError, ConfigError

__version__ = "0.1.0"

__all__ = [
    "BadgeType",
    "BadgeInfo",
    "BADGE_METADATA",
    "ALL_BADGE_TYPES",
    "badge_info",
    "badge_name",
    "badge_points",
    "parse_badge",
    "EndorsementRecord",
    "EndorsementType",
    "decayed_weight",
    "decay_percentage",
    "months_old",
    "total_decayed_weight",
    "Tier",
    "TierInfo",
    "TIER_CONFIG",
    "tier_from_score",
    "points_to_next_tier",
    "IdentitySignals",
    "UserSignals",
    "ScoreBreakdown",
    "ScoreCalculator",
    "SCORE_CATEGORIES",
    "calculate_score",
    "calculate_breakdown",
    "weighted_category_score",
    "CommitmentCodec",
    "ClaimParams",
    "SALT_VERSION",
    "derive_salt",
    "commit",
    "verify",
    "claim_params",
    "is_valid_address",
    "normalize_address",
    "OracleIdentity",
    "ScoreAttestation",
    "attest_score",
    "BadgeContext",
    "BadgeEligibility",
    "check_badge",
    "check_all_badges",
    "BadgeRequirement",
    "EligibilityCriteria",
    "UserAttributes",
    "EligibilityResult",
    "ChecklistItem",
    "evaluate",
    "build_checklist",
    "count_eligible",
    "filter_eligible",
    "signals_from_indexer",
    "endorsements_from_indexer",
    "badge_context_from_indexer",
    "attributes_from_indexer",
    "ApiKeyRateLimiter",
    "InMemoryRateLimitStore",
    "RateLimitStore",
    "RateCheckResult",
    "is_valid_api_key_format",
    "ShinroeError",
    "InvalidAddressError",
    "SignalValidationError",
    "ConfigError",
]

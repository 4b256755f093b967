"""
shinroe.badges — The fixed badge catalogue.

Badge types mirror the ledger contract's enum (0-4). Each type carries
display metadata and a fixed score bonus. Every lookup table is keyed on
the full set of ``BadgeType`` members and checked at import, so adding a
badge type fails loudly until each table covers it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class BadgeType(IntEnum):
    VERIFIED_IDENTITY = 0
    TRUSTED_TRADER = 1
    COMMUNITY_BUILDER = 2
    EARLY_ADOPTER = 3
    ELITE_SCORE = 4


ALL_BADGE_TYPES = tuple(BadgeType)

# Raw badge values from the indexer may not map to a known type.
BadgeValue = Union[BadgeType, int]

UNKNOWN_BADGE_POINTS = 20


@dataclass(frozen=True)
class BadgeInfo:
    name: str
    description: str
    requirement: str
    color: str


BADGE_METADATA: dict[BadgeType, BadgeInfo] = {
    BadgeType.VERIFIED_IDENTITY: BadgeInfo(
        name="Verified Member",
        description="Your identity has been verified",
        requirement="Verify your identity",
        color="#7c60fd",
    ),
    BadgeType.TRUSTED_TRADER: BadgeInfo(
        name="Power User",
        description="You are an active member of the community",
        requirement="Complete 50 activities",
        color="#10b981",
    ),
    BadgeType.COMMUNITY_BUILDER: BadgeInfo(
        name="Social Star",
        description="You help others in the community",
        requirement="Help 10+ friends",
        color="#ff6d75",
    ),
    BadgeType.EARLY_ADOPTER: BadgeInfo(
        name="Founding Member",
        description="You joined during launch",
        requirement="Join within first 30 days",
        color="#feea46",
    ),
    BadgeType.ELITE_SCORE: BadgeInfo(
        name="VIP",
        description="You have achieved top-tier status",
        requirement="Reach VIP status",
        color="#7c60fd",
    ),
}

BADGE_POINTS: dict[BadgeType, int] = {
    BadgeType.VERIFIED_IDENTITY: 50,
    BadgeType.TRUSTED_TRADER: 30,
    BadgeType.COMMUNITY_BUILDER: 25,
    BadgeType.EARLY_ADOPTER: 20,
    BadgeType.ELITE_SCORE: 40,
}


def _check_complete(table: dict, name: str) -> None:
    missing = set(BadgeType) - set(table)
    if missing:
        raise RuntimeError(f"{name} missing badge types: {sorted(m.name for m in missing)}")


_check_complete(BADGE_METADATA, "BADGE_METADATA")
_check_complete(BADGE_POINTS, "BADGE_POINTS")


def parse_badge(value) -> BadgeValue:
    """Map a raw value to a ``BadgeType``; unknown ints pass through unchanged."""
    if isinstance(value, BadgeType):
        return value
    raw = int(value)
    try:
        return BadgeType(raw)
    except ValueError:
        return raw


def badge_points(badge: BadgeValue) -> int:
    """Score bonus for owning ``badge``. Unknown types get a conservative default."""
    if isinstance(badge, BadgeType):
        return BADGE_POINTS[badge]
    parsed = parse_badge(badge)
    if isinstance(parsed, BadgeType):
        return BADGE_POINTS[parsed]
    return UNKNOWN_BADGE_POINTS


def badge_info(badge: BadgeType) -> BadgeInfo:
    return BADGE_METADATA[badge]


def badge_name(badge: BadgeValue) -> str:
    """Display name, or ``Badge #<n>`` for values outside the catalogue."""
    parsed = parse_badge(badge)
    if isinstance(parsed, BadgeType):
        return BADGE_METADATA[parsed].name
    return f"Badge #{parsed}"

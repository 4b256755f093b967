"""
shinroe.decay — Time-decayed endorsement weights.

An endorsement keeps its full stake for a six-month grace period. After
that it loses 10% per elapsed 30-day month, compounding:

    weight = floor(stake * 0.9 ^ floor(months_old - 6))

Stakes are integers in the token's smallest unit, so the decayed weight is
computed with exact integer arithmetic. The stored stake never changes;
decay is a pure function of (stake, created_at, now).
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional

SECONDS_PER_DAY = 86400
SECONDS_PER_MONTH = 30 * SECONDS_PER_DAY
GRACE_PERIOD_MONTHS = 6
DECAY_NUMERATOR = 9  # 0.9 per month
DECAY_DENOMINATOR = 10

TOKEN_DECIMALS = 18
TOKEN_UNIT = 10 ** TOKEN_DECIMALS
MIN_ENDORSEMENT_STAKE = 10 ** 16  # 0.01 token


class EndorsementType(IntEnum):
    GENERAL = 0
    FINANCIAL = 1
    PROFESSIONAL = 2

    @classmethod
    def from_value(cls, value) -> "EndorsementType":
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.GENERAL


def to_whole_tokens(amount: int) -> float:
    """Convert a smallest-unit amount to whole tokens."""
    return amount / TOKEN_UNIT


def months_old(created_at: float, now: Optional[float] = None) -> float:
    """Age in 30-day months, not rounded. Negative if ``created_at`` is ahead of ``now``."""
    if now is None:
        now = time.time()
    return (now - created_at) / SECONDS_PER_MONTH


def decayed_weight(stake: int, created_at: float, now: Optional[float] = None) -> int:
    """Present-day weight of ``stake`` created at ``created_at`` (epoch seconds).

    A ``created_at`` in the future yields a negative age, which falls inside
    the grace period. This tolerates minor clock drift between the indexer
    and the caller; it is not a security boundary.
    """
    stake = int(stake)
    age = months_old(created_at, now)
    if age <= GRACE_PERIOD_MONTHS:
        return stake
    decay_months = math.floor(age - GRACE_PERIOD_MONTHS)
    return stake * DECAY_NUMERATOR ** decay_months // DECAY_DENOMINATOR ** decay_months


def decay_percentage(stake: int, created_at: float, now: Optional[float] = None) -> int:
    """Whole percent of ``stake`` lost to decay (0 inside the grace period)."""
    stake = int(stake)
    if stake <= 0 or months_old(created_at, now) <= GRACE_PERIOD_MONTHS:
        return 0
    remaining = decayed_weight(stake, created_at, now) / stake * 100
    return 100 - math.floor(remaining + 0.5)


@dataclass(frozen=True)
class EndorsementRecord:
    """A stake one wallet placed on another."""
    stake_amount: int
    created_at: int
    active: bool = True
    endorser: str = ""
    endorsee: str = ""
    endorsement_type: EndorsementType = EndorsementType.GENERAL

    def weight_at(self, now: Optional[float] = None) -> int:
        if not self.active:
            return 0
        return decayed_weight(self.stake_amount, self.created_at, now)

    def decay_percentage(self, now: Optional[float] = None) -> int:
        return decay_percentage(self.stake_amount, self.created_at, now)


def total_decayed_weight(records: Iterable[EndorsementRecord], now: Optional[float] = None) -> int:
    """Sum of decayed weights over active records, in smallest units."""
    if now is None:
        now = time.time()
    return sum(r.weight_at(now) for r in records)

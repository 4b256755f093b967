"""
shinroe.signals — Assemble engine inputs from indexer user records.

The indexer (a subgraph over the ledger's events) hands back one record
per user. This module converts that shape into ``UserSignals``,
``BadgeContext`` and ``EndorsementRecord`` values. No fetching happens
here; callers pass the decoded record in.

Expected record fields (all optional):
    registeredAt            epoch seconds (string or int)
    isOnchainRegistered     bool
    totalEndorsementWeight  smallest token units (string or int)
    endorsementsReceived    [{endorser: {id}, stakeAmount, createdAt, active, endorsementType}]
    endorsementsGiven       [{endorsee: {id}, ...}]
    badges                  [{badgeType}]
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from .decay import SECONDS_PER_DAY, EndorsementRecord, EndorsementType, to_whole_tokens
from .eligibility import BadgeContext, UserAttributes
from .scoring import IdentitySignals, UserSignals

logger = logging.getLogger(__name__)


def _int(value, default: int = 0) -> int:
    if value is None or value == "":
        return default
    return int(value)


def _party(entry: dict, key: str) -> str:
    party = entry.get(key) or {}
    if isinstance(party, dict):
        return (party.get("id") or "").lower()
    return str(party).lower()


def account_age_days(record: Optional[dict], now: Optional[float] = None) -> int:
    if now is None:
        now = time.time()
    if not record or not record.get("registeredAt"):
        return 0
    return int((now - _int(record["registeredAt"])) // SECONDS_PER_DAY)


def signals_from_indexer(record: Optional[dict], now: Optional[float] = None,
                         identity: Optional[IdentitySignals] = None) -> UserSignals:
    """Build ``UserSignals`` from an indexer user record.

    A missing record yields all-zero signals (plus ``identity`` if given):
    absent data is never an error.
    """
    if not record:
        return UserSignals(identity_signals=identity)

    received = record.get("endorsementsReceived") or []
    given = record.get("endorsementsGiven") or []
    badges = [b["badgeType"] for b in record.get("badges") or [] if "badgeType" in b]
    age = account_age_days(record, now)

    counterparties = {_party(e, "endorser") for e in received} | {_party(e, "endorsee") for e in given}
    counterparties.discard("")

    signals = UserSignals(
        is_verified=len(badges) > 0,
        badge_types=frozenset(int(b) for b in badges),
        account_age_days=age,
        transaction_count=len(received) + len(given),
        endorsement_weight=to_whole_tokens(_int(record.get("totalEndorsementWeight"))),
        endorsement_count=sum(1 for e in received if e.get("active", True)),
        unique_counterparties=len(counterparties),
        on_chain_age_days=age,
        identity_signals=identity,
    )
    logger.debug("Assembled signals for %s", record.get("id", "<unknown>"))
    return signals


def endorsements_from_indexer(record: Optional[dict], direction: str = "received") -> list[EndorsementRecord]:
    """``EndorsementRecord``s for one side of a user's endorsements."""
    if direction not in ("received", "given"):
        raise ValueError(f"direction must be 'received' or 'given', got {direction!r}")
    if not record:
        return []
    key = "endorsementsReceived" if direction == "received" else "endorsementsGiven"
    return [
        EndorsementRecord(
            stake_amount=_int(e.get("stakeAmount")),
            created_at=_int(e.get("createdAt")),
            active=bool(e.get("active", True)),
            endorser=_party(e, "endorser"),
            endorsee=_party(e, "endorsee"),
            endorsement_type=EndorsementType.from_value(e.get("endorsementType", 0)),
        )
        for e in record.get(key) or []
    ]


def badge_context_from_indexer(record: Optional[dict], overall_score: int = 0,
                               identity_linked: bool = False,
                               contract_registered: bool = False) -> BadgeContext:
    """Badge predicate inputs. Registration counts if either the indexer or the contract says so."""
    record = record or {}
    received = record.get("endorsementsReceived") or []
    given = record.get("endorsementsGiven") or []
    registered_at = _int(record.get("registeredAt"), default=0) or None
    return BadgeContext(
        identity_linked=identity_linked,
        endorsements_given=sum(1 for e in given if e.get("active", True)),
        endorsements_received=sum(1 for e in received if e.get("active", True)),
        is_registered=registered_at is not None or contract_registered,
        registered_at=registered_at,
        overall_score=overall_score,
    )


def attributes_from_indexer(record: Optional[dict], score: int) -> UserAttributes:
    """Airdrop evaluation inputs from an indexer record and a computed score."""
    record = record or {}
    return UserAttributes(
        score=score,
        badges=frozenset(int(b["badgeType"]) for b in record.get("badges") or [] if "badgeType" in b),
        endorsement_weight=_int(record.get("totalEndorsementWeight")),
        is_registered=bool(record.get("isOnchainRegistered", False)),
        address=(record.get("id") or "").lower(),
    )

"""Tests for shinroe.signals — indexer record conversion."""

import pytest
from shinroe.badges import BadgeType
from shinroe.decay import EndorsementType
from shinroe.scoring import IdentitySignals, UserSignals, calculate_score
from shinroe.signals import (
    account_age_days,
    attributes_from_indexer,
    badge_context_from_indexer,
    endorsements_from_indexer,
    signals_from_indexer,
)

from conftest import DAY, NOW

A = "0x" + "aa" * 20
B = "0x" + "bb" * 20
C = "0x" + "cc" * 20


@pytest.fixture
def record():
    return {
        "id": "0x" + "11" * 20,
        "registeredAt": str(NOW - 400 * DAY),
        "isOnchainRegistered": True,
        "totalEndorsementWeight": "5000000000000000000",
        "endorsementsReceived": [
            {"endorser": {"id": A.upper().replace("0X", "0x")}, "stakeAmount": "1000000000000000000",
             "createdAt": str(NOW - 10 * DAY), "active": True, "endorsementType": 1},
            {"endorser": {"id": B}, "stakeAmount": "2000000000000000000",
             "createdAt": str(NOW - 300 * DAY), "active": False, "endorsementType": 0},
        ],
        "endorsementsGiven": [
            {"endorsee": {"id": C}, "stakeAmount": "10000000000000000",
             "createdAt": str(NOW - DAY), "active": True},
            {"endorsee": {"id": A}, "stakeAmount": "10000000000000000",
             "createdAt": str(NOW - DAY), "active": True},
        ],
        "badges": [{"badgeType": 0}],
    }


class TestSignalsFromIndexer:
    def test_fields(self, record):
        s = signals_from_indexer(record, now=NOW)
        assert s.is_verified
        assert s.badge_types == frozenset({BadgeType.VERIFIED_IDENTITY})
        assert s.account_age_days == 400
        assert s.on_chain_age_days == 400
        assert s.transaction_count == 4
        assert s.endorsement_count == 1
        assert s.unique_counterparties == 3
        assert s.endorsement_weight == 5.0

    def test_score(self, record):
        assert calculate_score(signals_from_indexer(record, now=NOW)) == 617

    def test_missing_record(self):
        assert signals_from_indexer(None, now=NOW) == UserSignals()

    def test_missing_record_keeps_identity(self):
        identity = IdentitySignals(kyc_level=2)
        s = signals_from_indexer(None, now=NOW, identity=identity)
        assert s.identity_signals == identity
        assert calculate_score(s) == 400 + 54

    def test_no_badges_not_verified(self, record):
        record["badges"] = []
        assert not signals_from_indexer(record, now=NOW).is_verified


def test_account_age_days():
    assert account_age_days({"registeredAt": NOW - 3 * DAY - 1}, now=NOW) == 3
    assert account_age_days({}, now=NOW) == 0


class TestEndorsements:
    def test_received(self, record):
        recs = endorsements_from_indexer(record)
        assert len(recs) == 2
        assert recs[0].endorser == A
        assert recs[0].endorsement_type is EndorsementType.FINANCIAL
        assert recs[0].stake_amount == 10 ** 18
        assert not recs[1].active

    def test_given(self, record):
        recs = endorsements_from_indexer(record, direction="given")
        assert [r.endorsee for r in recs] == [C, A]
        assert recs[0].endorsement_type is EndorsementType.GENERAL

    def test_bad_direction(self, record):
        with pytest.raises(ValueError):
            endorsements_from_indexer(record, direction="sideways")

    def test_missing_record(self):
        assert endorsements_from_indexer(None) == []


class TestBadgeContext:
    def test_from_record(self, record):
        ctx = badge_context_from_indexer(record, overall_score=617, identity_linked=True)
        assert ctx.endorsements_given == 2
        assert ctx.endorsements_received == 1
        assert ctx.is_registered
        assert ctx.registered_at == NOW - 400 * DAY
        assert ctx.overall_score == 617

    def test_contract_registration_counts(self):
        ctx = badge_context_from_indexer(None, contract_registered=True)
        assert ctx.is_registered
        assert ctx.registered_at is None


def test_attributes_from_indexer(record):
    attrs = attributes_from_indexer(record, score=617)
    assert attrs.score == 617
    assert attrs.badges == frozenset({BadgeType.VERIFIED_IDENTITY})
    assert attrs.endorsement_weight == 5 * 10 ** 18
    assert attrs.is_registered
    assert attrs.address == record["id"]


def test_exported_from_package():
    import shinroe

    assert shinroe.signals_from_indexer is signals_from_indexer
    assert shinroe.badge_context_from_indexer is badge_context_from_indexer
    assert "endorsements_from_indexer" in shinroe.__all__

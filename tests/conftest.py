"""Shared fixtures for shinroe tests."""
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from shinroe.badges import BadgeType
from shinroe.scoring import UserSignals

NOW = 1_700_000_000
DAY = 86400

# Hardhat's first default account; checksummed form.
ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


@pytest.fixture
def reference_signals():
    """Signals that produce a score of exactly 829."""
    return UserSignals(
        is_verified=True,
        badge_types=frozenset({BadgeType.VERIFIED_IDENTITY}),
        account_age_days=400,
        transaction_count=60,
        endorsement_weight=5,
        endorsement_count=12,
        unique_counterparties=8,
        on_chain_age_days=400,
    )


@pytest.fixture
def address():
    return ADDRESS

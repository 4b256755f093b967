"""
shinroe.commitment — Score commitments for public ledgers.

A commitment binds (user, score, salt) into a single 32-byte hash that can
be published in place of the raw score:

    salt       = keccak256(address ++ utf8(salt_version))
    commitment = keccak256(address ++ uint256(score) ++ salt)

The encoding is Solidity's ``abi.encodePacked``: the address as 20 raw
bytes, the score as a 32-byte big-endian integer and the salt as 32 raw
bytes. Any implementation using the same packing and keccak-256 produces
identical hashes.

The salt is never stored; it is re-derived from the address and the salt
version. Bumping the salt version invalidates every commitment issued
under the old one.

``verify`` is a freshness check: it recomputes the score from live signals
supplied by the caller and accepts claims within a tolerance band around
that live value. It trusts those signals. It is not a zero-knowledge proof
that a published commitment was produced honestly.
"""

from __future__ import annotations

import hmac
import logging
import re
from dataclasses import dataclass
from typing import Optional

from Crypto.Hash import keccak

from .config import DEFAULT_SALT_VERSION, DEFAULT_VERIFY_TOLERANCE, Settings
from .errors import InvalidAddressError
from .scoring import UserSignals, calculate_score

logger = logging.getLogger(__name__)

SALT_VERSION = DEFAULT_SALT_VERSION
UINT256_MAX = 2 ** 256 - 1

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


# ─── Address helpers ───────────────────────────────────────────────

def is_valid_address(address) -> bool:
    return isinstance(address, str) and bool(_ADDRESS_RE.match(address))


def normalize_address(address: str) -> str:
    """Lowercase ``0x``-prefixed form. Raises ``InvalidAddressError``."""
    if not is_valid_address(address):
        raise InvalidAddressError(address)
    return address.lower()


def address_bytes(address: str) -> bytes:
    return bytes.fromhex(normalize_address(address)[2:])


# ─── Hashing ───────────────────────────────────────────────────────

def keccak256(data: bytes) -> bytes:
    h = keccak.new(digest_bits=256)
    h.update(data)
    return h.digest()


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def encode_uint256(value: int) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Score must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"Score out of uint256 range: {value}")
    return value.to_bytes(32, "big")


@dataclass(frozen=True)
class ClaimParams:
    """Values a ledger claim transaction needs alongside the address."""
    score: int
    salt: str  # 0x-prefixed hex


class CommitmentCodec:
    """Derives salts and computes/validates score commitments.

    All methods are referentially transparent: the same inputs give the
    same outputs from any thread at any time.
    """

    def __init__(self, salt_version: str = SALT_VERSION,
                 tolerance: float = DEFAULT_VERIFY_TOLERANCE):
        if not salt_version:
            raise ValueError("salt_version must not be empty")
        self.salt_version = salt_version
        self.tolerance = tolerance

    @classmethod
    def from_settings(cls, settings: Settings) -> "CommitmentCodec":
        return cls(salt_version=settings.salt_version, tolerance=settings.verify_tolerance)

    def salt_bytes(self, address: str) -> bytes:
        return keccak256(address_bytes(address) + self.salt_version.encode("utf-8"))

    def derive_salt(self, address: str) -> str:
        """Deterministic per-user salt as 0x-prefixed hex."""
        return to_hex(self.salt_bytes(address))

    def commit_bytes(self, address: str, score: int) -> bytes:
        packed = address_bytes(address) + encode_uint256(score) + self.salt_bytes(address)
        return keccak256(packed)

    def commit(self, address: str, score: int) -> str:
        """Commitment hash for (address, score) as 0x-prefixed hex."""
        return to_hex(self.commit_bytes(address, score))

    def matches(self, address: str, score: int, commitment: str) -> bool:
        """True iff ``commitment`` is the hash of (address, score) under this salt version."""
        expected = self.commit(address, score).encode()
        return hmac.compare_digest(expected, commitment.lower().encode("utf-8"))

    def claim_params(self, address: str, score: int) -> ClaimParams:
        encode_uint256(score)
        return ClaimParams(score=score, salt=self.derive_salt(address))

    def verify(self, address: str, claimed_score: int, live_signals: UserSignals) -> bool:
        """Accept ``claimed_score`` iff it is within tolerance of the live score.

        The band is ``tolerance * live_score`` around the live value, not the
        claim. A mismatch returns ``False`` with no detail about how far off
        the claim was.
        """
        normalize_address(address)
        true_score = calculate_score(live_signals)
        ok = abs(true_score - claimed_score) <= true_score * self.tolerance
        if not ok:
            logger.debug("Score claim rejected for %s", address.lower())
        return ok


# ─── Module-level API using the default salt version ───────────────

_default_codec = CommitmentCodec()


def derive_salt(address: str, salt_version: Optional[str] = None) -> str:
    codec = _default_codec if salt_version is None else CommitmentCodec(salt_version)
    return codec.derive_salt(address)


def commit(address: str, score: int, salt_version: Optional[str] = None) -> str:
    codec = _default_codec if salt_version is None else CommitmentCodec(salt_version)
    return codec.commit(address, score)


def verify(address: str, claimed_score: int, live_signals: UserSignals) -> bool:
    return _default_codec.verify(address, claimed_score, live_signals)


def claim_params(address: str, score: int) -> ClaimParams:
    return _default_codec.claim_params(address, score)

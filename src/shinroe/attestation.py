"""
shinroe.attestation — Signed results of score freshness checks.

``CommitmentCodec.verify`` trusts whoever supplies the live signals. A
``ScoreAttestation`` does not remove that trust; it records it. The oracle
that ran the check signs (address, commitment, verified, timestamp) with
its Ed25519 key so a consumer can authenticate who vouched for the result.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from nacl.encoding import HexEncoder
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .commitment import CommitmentCodec, normalize_address
from .scoring import UserSignals


class OracleIdentity:
    """Ed25519 keypair for a scoring oracle."""

    def __init__(self, signing_key: Optional[SigningKey] = None):
        self.signing_key = signing_key or SigningKey.generate()
        self.verify_key = self.signing_key.verify_key

    @property
    def public_key_hex(self) -> str:
        return self.verify_key.encode(encoder=HexEncoder).decode()

    @property
    def oracle_id(self) -> str:
        return f"oracle:{hashlib.sha256(self.public_key_hex.encode()).hexdigest()[:16]}"

    def sign(self, data: bytes) -> bytes:
        return self.signing_key.sign(data).signature

    def export_private_key(self) -> str:
        return self.signing_key.encode(encoder=HexEncoder).decode()

    @classmethod
    def from_private_key(cls, hex_key: str) -> "OracleIdentity":
        return cls(signing_key=SigningKey(hex_key.encode(), encoder=HexEncoder))


@dataclass
class ScoreAttestation:
    """An oracle's signed statement that a claim did or did not check out."""
    address: str
    commitment: str
    verified: bool
    timestamp: str = ""
    signature: Optional[str] = None
    oracle_pubkey: Optional[str] = None

    def __post_init__(self):
        self.address = normalize_address(self.address)
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def claim_data(self) -> bytes:
        """Canonical bytes for signing."""
        claim = {
            "address": self.address,
            "commitment": self.commitment,
            "verified": self.verified,
            "timestamp": self.timestamp,
        }
        return json.dumps(claim, sort_keys=True, separators=(",", ":")).encode()

    def sign(self, oracle: OracleIdentity) -> "ScoreAttestation":
        self.signature = oracle.sign(self.claim_data).hex()
        self.oracle_pubkey = oracle.public_key_hex
        return self

    def verify(self) -> bool:
        """Check the oracle's signature over the claim."""
        if not self.signature or not self.oracle_pubkey:
            return False
        try:
            vk = VerifyKey(self.oracle_pubkey.encode(), encoder=HexEncoder)
            vk.verify(self.claim_data, bytes.fromhex(self.signature))
            return True
        except (BadSignatureError, ValueError):
            return False

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "commitment": self.commitment,
            "verified": self.verified,
            "timestamp": self.timestamp,
            "signature": self.signature,
            "oracle_pubkey": self.oracle_pubkey,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScoreAttestation":
        return cls(
            address=data["address"],
            commitment=data["commitment"],
            verified=bool(data["verified"]),
            timestamp=data.get("timestamp", ""),
            signature=data.get("signature"),
            oracle_pubkey=data.get("oracle_pubkey"),
        )


def attest_score(oracle: OracleIdentity, codec: CommitmentCodec, address: str,
                 claimed_score: int, live_signals: UserSignals,
                 timestamp: Optional[str] = None) -> ScoreAttestation:
    """Run the freshness check and sign its outcome.

    The attestation carries the commitment to the claimed score, never the
    score itself.
    """
    verified = codec.verify(address, claimed_score, live_signals)
    att = ScoreAttestation(
        address=address,
        commitment=codec.commit(address, claimed_score),
        verified=verified,
        timestamp=timestamp or "",
    )
    return att.sign(oracle)

"""Tests for shinroe.commitment — salts, commitments and freshness checks."""

from dataclasses import replace

import pytest
from shinroe.commitment import (
    CommitmentCodec,
    ClaimParams,
    SALT_VERSION,
    claim_params,
    commit,
    derive_salt,
    encode_uint256,
    is_valid_address,
    keccak256,
    normalize_address,
    verify,
)
from shinroe.config import Settings
from shinroe.errors import InvalidAddressError, ShinroeError

# Reference vectors computed with an independent keccak-256 implementation
# over abi.encodePacked(address, "shinroe-salt-v1") and
# abi.encodePacked(address, uint256(829), salt).
EXPECTED_SALT = "0xd2942786c88fe7b6f13a90cd89e1db44b6b33bf6b45529980927994d0b5bc6d1"
EXPECTED_SALT_V2 = "0x8822fce9dd0bff1ed04af9f7f855aa2f43289f51c825443f65cfc05ad4db6e59"
EXPECTED_COMMIT_829 = "0x8e33ada0477d0cb23eee84ab326008e85d130f2cae4a14344b692440f1f84553"


class TestKeccak:
    def test_empty(self):
        assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"

    def test_abc_is_keccak_not_sha3(self):
        assert keccak256(b"abc").hex() == "4e03657aea45a94fc7d47ba826c8d667c0d1e6e33a64a036ec44f58fa12d6c45"


class TestAddresses:
    def test_valid(self, address):
        assert is_valid_address(address)
        assert is_valid_address(address.lower())

    @pytest.mark.parametrize("bad", ["", "0x123", "f39fd6e51aad88f6f4ce6ab8827279cfffb92266",
                                     "0xZZ9fd6e51aad88f6f4ce6ab8827279cfffb92266", None, 42])
    def test_invalid(self, bad):
        assert not is_valid_address(bad)

    def test_normalize_lowercases(self, address):
        assert normalize_address(address) == address.lower()

    def test_normalize_raises(self):
        with pytest.raises(InvalidAddressError):
            normalize_address("0xnope")

    def test_invalid_address_error_is_value_error(self):
        assert issubclass(InvalidAddressError, ValueError)
        assert issubclass(InvalidAddressError, ShinroeError)


class TestSalt:
    def test_reference_vector(self, address):
        assert derive_salt(address) == EXPECTED_SALT

    def test_case_insensitive(self, address):
        assert derive_salt(address.lower()) == derive_salt(address.upper().replace("0X", "0x"))

    def test_deterministic(self, address):
        assert derive_salt(address) == derive_salt(address)

    def test_version_changes_salt(self, address):
        assert derive_salt(address, salt_version="shinroe-salt-v2") == EXPECTED_SALT_V2

    def test_default_version(self):
        assert SALT_VERSION == "shinroe-salt-v1"

    def test_salt_is_32_bytes(self, address):
        salt = derive_salt(address)
        assert salt.startswith("0x")
        assert len(bytes.fromhex(salt[2:])) == 32


class TestCommit:
    def test_reference_vector(self, address):
        assert commit(address, 829) == EXPECTED_COMMIT_829

    def test_deterministic(self, address):
        assert commit(address, 700) == commit(address, 700)

    def test_different_scores_differ(self, address):
        hashes = {commit(address, s) for s in range(0, 1001, 7)}
        assert len(hashes) == len(range(0, 1001, 7))

    def test_different_users_differ(self, address):
        other = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
        assert commit(address, 829) != commit(other, 829)

    def test_version_bump_invalidates(self, address):
        codec_v2 = CommitmentCodec(salt_version="shinroe-salt-v2")
        assert codec_v2.commit(address, 829) != EXPECTED_COMMIT_829

    def test_commit_bytes_matches_hex(self, address):
        codec = CommitmentCodec()
        assert "0x" + codec.commit_bytes(address, 829).hex() == EXPECTED_COMMIT_829

    def test_explicit_packing(self, address):
        codec = CommitmentCodec()
        packed = (bytes.fromhex(address[2:].lower())
                  + (829).to_bytes(32, "big")
                  + codec.salt_bytes(address))
        assert len(packed) == 20 + 32 + 32
        assert keccak256(packed) == codec.commit_bytes(address, 829)

    def test_negative_score_rejected(self, address):
        with pytest.raises(ValueError):
            commit(address, -1)

    def test_non_int_score_rejected(self, address):
        with pytest.raises(ValueError):
            commit(address, 829.0)
        with pytest.raises(ValueError):
            commit(address, True)

    def test_bad_address_rejected(self):
        with pytest.raises(InvalidAddressError):
            commit("0x1234", 829)

    def test_uint256_encoding(self):
        assert encode_uint256(1) == b"\x00" * 31 + b"\x01"
        with pytest.raises(ValueError):
            encode_uint256(2 ** 256)


class TestMatches:
    def test_matches_published(self, address):
        assert CommitmentCodec().matches(address, 829, EXPECTED_COMMIT_829)

    def test_matches_uppercase_hex(self, address):
        assert CommitmentCodec().matches(address, 829, "0x" + EXPECTED_COMMIT_829[2:].upper())

    def test_wrong_score_does_not_match(self, address):
        assert not CommitmentCodec().matches(address, 830, EXPECTED_COMMIT_829)

    @pytest.mark.parametrize("bad", ["0x\u00e9", "", "not-a-hash"])
    def test_malformed_commitment_does_not_match(self, address, bad):
        assert CommitmentCodec().matches(address, 829, bad) is False


class TestClaimParams:
    def test_claim_params(self, address):
        params = claim_params(address, 829)
        assert params == ClaimParams(score=829, salt=EXPECTED_SALT)

    def test_claim_params_rejects_negative(self, address):
        with pytest.raises(ValueError):
            claim_params(address, -5)


class TestVerify:
    def test_true_score_verifies(self, address, reference_signals):
        assert verify(address, 829, reference_signals)

    def test_double_score_fails(self, address, reference_signals):
        assert not verify(address, 829 * 2, reference_signals)

    @pytest.mark.parametrize("claimed,ok", [
        (870, True),   # +41 <= 41.45
        (871, False),  # +42
        (788, True),   # -41
        (787, False),  # -42
    ])
    def test_tolerance_band_around_live_score(self, address, reference_signals, claimed, ok):
        assert verify(address, claimed, reference_signals) is ok

    def test_stale_signals_fail(self, address, reference_signals):
        # Claim made when the user had more endorsements than now observable
        stale = replace(reference_signals, endorsement_count=0, transaction_count=0)
        assert not verify(address, 829, stale)

    def test_custom_tolerance(self, address, reference_signals):
        strict = CommitmentCodec(tolerance=0.0)
        assert strict.verify(address, 829, reference_signals)
        assert not strict.verify(address, 830, reference_signals)

    def test_bad_address_raises(self, reference_signals):
        with pytest.raises(InvalidAddressError):
            verify("not-an-address", 829, reference_signals)


class TestCodecConstruction:
    def test_from_settings(self, address):
        codec = CommitmentCodec.from_settings(Settings(salt_version="shinroe-salt-v2", verify_tolerance=0.1))
        assert codec.derive_salt(address) == EXPECTED_SALT_V2
        assert codec.tolerance == 0.1

    def test_empty_version_rejected(self):
        with pytest.raises(ValueError):
            CommitmentCodec(salt_version="")

"""Tests for the shinroe CLI."""

import json

import pytest
from shinroe.attestation import OracleIdentity, ScoreAttestation
from shinroe.cli import build_parser, main

from conftest import ADDRESS, DAY, NOW

EXPECTED_COMMIT_829 = "0x8e33ada0477d0cb23eee84ab326008e85d130f2cae4a14344b692440f1f84553"

REFERENCE_SIGNALS = {
    "is_verified": True,
    "badge_types": [0],
    "account_age_days": 400,
    "transaction_count": 60,
    "endorsement_weight": 5,
    "endorsement_count": 12,
    "unique_counterparties": 8,
    "on_chain_age_days": 400,
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("SHINROE_SALT_VERSION", "SHINROE_VERIFY_TOLERANCE",
                "SHINROE_EARLY_ADOPTER_CUTOFF", "SHINROE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def signals_file(tmp_path):
    path = tmp_path / "signals.json"
    path.write_text(json.dumps(REFERENCE_SIGNALS))
    return str(path)


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return str(path)


class TestParser:
    def test_commands_registered(self):
        parser = build_parser()
        args = parser.parse_args(["commit", ADDRESS, "829", "--expect", "0x00"])
        assert args.command == "commit"
        assert args.score == 829
        assert args.expect == "0x00"

    def test_no_command_exits(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1


class TestScore:
    def test_score(self, signals_file):
        result = main(["--json", "score", signals_file, "--trend", "12"])
        assert result["overall"] == 829
        assert result["tier"] == "excellent"
        assert result["trend"] == 12

    def test_human_output(self, signals_file, capsys):
        main(["score", signals_file])
        assert "829" in capsys.readouterr().out

    def test_invalid_payload(self, tmp_path):
        path = _write(tmp_path, "bad.json", {"transaction_count": -4})
        with pytest.raises(SystemExit) as exc:
            main(["score", path])
        assert exc.value.code == 1

    def test_missing_file(self, capsys):
        with pytest.raises(SystemExit):
            main(["score", "/nonexistent/signals.json"])
        assert "File not found" in capsys.readouterr().err


class TestTier:
    def test_tier(self):
        result = main(["--json", "tier", "829"])
        assert result["tier"] == "excellent"
        assert result["next_tier"] == "elite"
        assert result["points_needed"] == 21

    def test_top(self):
        result = main(["--json", "tier", "1000"])
        assert result["next_tier"] is None

    def test_out_of_range(self):
        with pytest.raises(SystemExit):
            main(["tier", "1001"])


def test_decay():
    now = 225 * DAY  # 7.5 months
    result = main(["--json", "decay", str(10 ** 18), "0", "--now", str(now)])
    assert result["decayed_weight"] == 9 * 10 ** 17
    assert result["decay_percentage"] == 10


class TestCommitment:
    def test_salt(self):
        result = main(["--json", "salt", ADDRESS])
        assert result["salt"] == "0xd2942786c88fe7b6f13a90cd89e1db44b6b33bf6b45529980927994d0b5bc6d1"

    def test_salt_version_from_env(self, monkeypatch):
        monkeypatch.setenv("SHINROE_SALT_VERSION", "shinroe-salt-v2")
        result = main(["--json", "salt", ADDRESS])
        assert result["salt"] == "0x8822fce9dd0bff1ed04af9f7f855aa2f43289f51c825443f65cfc05ad4db6e59"

    def test_commit(self):
        result = main(["--json", "commit", ADDRESS, "829", "--expect", EXPECTED_COMMIT_829])
        assert result["commitment"] == EXPECTED_COMMIT_829
        assert result["matches"] is True

    def test_commit_bad_address(self, capsys):
        with pytest.raises(SystemExit):
            main(["commit", "0x12", "829"])
        assert "Invalid address" in capsys.readouterr().err


class TestVerify:
    def test_verified(self, signals_file):
        result = main(["--json", "verify", ADDRESS, "829", signals_file])
        assert result["verified"] is True

    def test_inflated_claim(self, signals_file):
        result = main(["--json", "verify", ADDRESS, "1658", signals_file])
        assert result["verified"] is False

    def test_signed(self, signals_file, tmp_path):
        oracle = OracleIdentity()
        key = tmp_path / "oracle.key"
        key.write_text(oracle.export_private_key())
        result = main(["--json", "verify", ADDRESS, "829", signals_file, "-k", str(key)])
        att = ScoreAttestation.from_dict(result["attestation"])
        assert att.verify()
        assert att.verified
        assert att.oracle_pubkey == oracle.public_key_hex


def test_badges(tmp_path):
    path = _write(tmp_path, "ctx.json", {
        "identity_linked": True,
        "endorsements_given": 12,
        "endorsements_received": 3,
        "is_registered": True,
        "registered_at": NOW - DAY,
        "overall_score": 829,
    })
    result = main(["--json", "badges", path, "--now", str(NOW)])
    eligible = {b["name"]: b["eligible"] for b in result["badges"]}
    assert eligible == {
        "Verified Member": True,
        "Power User": False,
        "Social Star": True,
        "Founding Member": True,
        "VIP": False,
    }


def test_badges_with_cutoff(tmp_path, monkeypatch):
    monkeypatch.setenv("SHINROE_EARLY_ADOPTER_CUTOFF", str(NOW - 10 * DAY))
    path = _write(tmp_path, "ctx.json", {"is_registered": True, "registered_at": NOW - DAY})
    result = main(["--json", "badges", path, "--now", str(NOW)])
    early = [b for b in result["badges"] if b["badge"] == 3][0]
    assert not early["eligible"]


class TestEligibility:
    def test_eligible(self, tmp_path):
        criteria = _write(tmp_path, "criteria.json", {"min_score": 700, "required_badges": [0]})
        user = _write(tmp_path, "user.json", {"address": ADDRESS, "score": 829, "badges": [0]})
        result = main(["--json", "eligibility", criteria, user])
        assert result["eligible"] is True
        assert [i["passed"] for i in result["checklist"]] == [True, True]

    def test_not_eligible(self, tmp_path, capsys):
        criteria = _write(tmp_path, "criteria.json", {"min_score": 900, "requires_registration": True})
        user = _write(tmp_path, "user.json", {"score": 829})
        result = main(["eligibility", criteria, user])
        assert result["reasons"] == [
            "Registration required",
            "Minimum score required: 900 (yours: 829)",
        ]
        assert "NOT ELIGIBLE" in capsys.readouterr().out


def test_score_rejects_non_finite_weight(tmp_path, capsys):
    path = tmp_path / "inf.json"
    path.write_text('{"endorsement_weight": Infinity}')
    with pytest.raises(SystemExit) as exc:
        main(["score", str(path)])
    assert exc.value.code == 1
    assert "endorsement_weight" in capsys.readouterr().err


def test_commit_expect_non_ascii(capsys):
    result = main(["--json", "commit", ADDRESS, "829", "--expect", "0xé"])
    assert result["matches"] is False

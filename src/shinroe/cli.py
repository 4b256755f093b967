#!/usr/bin/env python3
"""
shinroe CLI — Offline command-line interface for the reputation engine.

Works directly on JSON payloads (no indexer or ledger required).

Commands:
    score        - Compute score breakdown from a signals file
    tier         - Classify a score
    decay        - Decayed weight of an endorsement stake
    salt         - Derive the commitment salt for an address
    commit       - Compute the score commitment for an address
    verify       - Check a claimed score against live signals
    badges       - Evaluate badge eligibility from a context file
    eligibility  - Evaluate airdrop criteria for a user
"""

import argparse
import json
import logging
import sys
import time
from typing import Optional

from shinroe.errors import ShinroeError

logger = logging.getLogger(__name__)


def _output(data: dict, args: argparse.Namespace, human_fn=None):
    """Output data as JSON or pretty-printed."""
    if getattr(args, 'json', False):
        print(json.dumps(data, indent=2, default=str))
    elif human_fn:
        human_fn(data)
    else:
        print(json.dumps(data, indent=2, default=str))


def _load_json(path: str):
    """Load JSON from a file path, or stdin for '-'."""
    if path == '-':
        return json.load(sys.stdin)
    with open(path) as f:
        return json.load(f)


def _codec(args):
    from shinroe.commitment import CommitmentCodec
    from shinroe.config import load_settings

    settings = load_settings()
    if getattr(args, 'salt_version', None):
        return CommitmentCodec(salt_version=args.salt_version, tolerance=settings.verify_tolerance)
    return CommitmentCodec.from_settings(settings)


# ─── Commands ──────────────────────────────────────────────────────

def cmd_score(args):
    """Compute a score breakdown from a signals JSON file."""
    from shinroe.schemas import parse_user_signals
    from shinroe.scoring import calculate_breakdown

    signals = parse_user_signals(_load_json(args.file))
    result = calculate_breakdown(signals, trend=args.trend).to_dict()

    def human(d):
        print(f"📊 Score: {d['overall']} ({d['tier']})")
        for key in ("identity", "financial", "social", "transactional", "behavioral"):
            print(f"   {key.capitalize():<14} {d[key]:>3}")
        if d['trend']:
            print(f"   Trend:         {d['trend']:+d}")

    _output(result, args, human)
    return result


def cmd_tier(args):
    """Classify a score into a tier."""
    from shinroe.tiers import points_to_next_tier, tier_from_score

    if not 0 <= args.score <= 1000:
        raise ValueError("Score must be between 0 and 1000")
    tier = tier_from_score(args.score)
    nxt, needed = points_to_next_tier(args.score)
    result = {
        "score": args.score,
        "tier": tier.value,
        "label": tier.label,
        "next_tier": nxt.value if nxt else None,
        "points_needed": needed,
    }

    def human(d):
        print(f"🏷️  {d['score']} → {d['label']}")
        if d['next_tier']:
            print(f"   {d['points_needed']} points to {d['next_tier']}")

    _output(result, args, human)
    return result


def cmd_decay(args):
    """Show the decayed weight of a stake."""
    from shinroe.decay import decay_percentage, decayed_weight, months_old

    now = args.now if args.now is not None else time.time()
    weight = decayed_weight(args.stake, args.created_at, now)
    result = {
        "stake": args.stake,
        "created_at": args.created_at,
        "months_old": round(months_old(args.created_at, now), 2),
        "decayed_weight": weight,
        "decay_percentage": decay_percentage(args.stake, args.created_at, now),
    }

    def human(d):
        print(f"⏳ {d['stake']} → {d['decayed_weight']}")
        print(f"   Age:     {d['months_old']} months")
        print(f"   Decayed: {d['decay_percentage']}%")

    _output(result, args, human)
    return result


def cmd_salt(args):
    """Derive the commitment salt for an address."""
    codec = _codec(args)
    result = {
        "address": args.address.lower(),
        "salt_version": codec.salt_version,
        "salt": codec.derive_salt(args.address),
    }
    _output(result, args, lambda d: print(d['salt']))
    return result


def cmd_commit(args):
    """Compute a score commitment."""
    codec = _codec(args)
    params = codec.claim_params(args.address, args.score)
    result = {
        "address": args.address.lower(),
        "score": args.score,
        "salt_version": codec.salt_version,
        "salt": params.salt,
        "commitment": codec.commit(args.address, args.score),
    }
    if args.expect:
        result["matches"] = codec.matches(args.address, args.score, args.expect)

    def human(d):
        print(f"🔒 {d['commitment']}")
        print(f"   Salt:    {d['salt']} ({d['salt_version']})")
        if 'matches' in d:
            print(f"   Matches: {'✅' if d['matches'] else '❌'}")

    _output(result, args, human)
    return result


def cmd_verify(args):
    """Check a claimed score against live signals."""
    from shinroe.schemas import parse_user_signals

    codec = _codec(args)
    signals = parse_user_signals(_load_json(args.file))
    verified = codec.verify(args.address, args.claimed_score, signals)
    result = {
        "address": args.address.lower(),
        "claimed_score": args.claimed_score,
        "verified": verified,
        "timestamp": int(time.time()),
    }

    if args.oracle_key:
        from shinroe.attestation import OracleIdentity, attest_score

        with open(args.oracle_key) as f:
            oracle = OracleIdentity.from_private_key(f.read().strip())
        result["attestation"] = attest_score(oracle, codec, args.address, args.claimed_score, signals).to_dict()

    def human(d):
        if d['verified']:
            print(f"✅ VERIFIED: {d['address']} claimed {d['claimed_score']}")
        else:
            print(f"❌ NOT VERIFIED: {d['address']} claimed {d['claimed_score']}")
        if 'attestation' in d:
            print(f"   Signed by: {d['attestation']['oracle_pubkey'][:16]}...")

    _output(result, args, human)
    return result


def cmd_badges(args):
    """Evaluate all badge predicates for a user context."""
    from shinroe.config import load_settings
    from shinroe.eligibility import check_all_badges
    from shinroe.schemas import parse_badge_context

    settings = load_settings()
    ctx = parse_badge_context(_load_json(args.file))
    checks = check_all_badges(ctx, now=args.now, early_adopter_cutoff=settings.early_adopter_cutoff)
    result = {"badges": [c.to_dict() for c in checks]}

    def human(d):
        for b in d['badges']:
            mark = "✅" if b['eligible'] else "⬜"
            line = f"{mark} {b['name']:<16} {b['reason']}"
            if 'progress' in b:
                line += f" ({b['progress']['current']}/{b['progress']['required']})"
            print(line)

    _output(result, args, human)
    return result


def cmd_eligibility(args):
    """Evaluate airdrop criteria for a user."""
    from shinroe.eligibility import build_checklist, evaluate
    from shinroe.schemas import parse_criteria, parse_user_attributes

    criteria = parse_criteria(_load_json(args.criteria))
    user = parse_user_attributes(_load_json(args.user))
    decision = evaluate(criteria, user)
    result = decision.to_dict()
    result["checklist"] = [
        {"label": i.label, "requirement": i.requirement, "current": i.current, "passed": i.passed}
        for i in build_checklist(criteria, decision)
    ]

    def human(d):
        if d['eligible']:
            print("✅ ELIGIBLE")
        else:
            print("❌ NOT ELIGIBLE")
            for reason in d['reasons']:
                print(f"   - {reason}")

    _output(result, args, human)
    return result


# ─── Parser ────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shinroe",
        description="shinroe — Reputation scoring & eligibility CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    parser.add_argument("--log-level", default=None, help="Log level (default from SHINROE_LOG_LEVEL)")

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # score
    p = sub.add_parser("score", help="Compute score breakdown")
    p.add_argument("file", help="Signals JSON file (- for stdin)")
    p.add_argument("--trend", type=int, default=0, help="Change since last period")

    # tier
    p = sub.add_parser("tier", help="Classify a score")
    p.add_argument("score", type=int, help="Score (0-1000)")

    # decay
    p = sub.add_parser("decay", help="Decayed endorsement weight")
    p.add_argument("stake", type=int, help="Stake in smallest token units")
    p.add_argument("created_at", type=int, help="Creation time (epoch seconds)")
    p.add_argument("--now", type=int, default=None, help="Evaluation time (epoch seconds)")

    # salt
    p = sub.add_parser("salt", help="Derive commitment salt")
    p.add_argument("address", help="0x-prefixed address")
    p.add_argument("--salt-version", help="Override salt version")

    # commit
    p = sub.add_parser("commit", help="Compute score commitment")
    p.add_argument("address", help="0x-prefixed address")
    p.add_argument("score", type=int, help="Score to commit")
    p.add_argument("--salt-version", help="Override salt version")
    p.add_argument("--expect", help="Published commitment to compare against")

    # verify
    p = sub.add_parser("verify", help="Verify a claimed score")
    p.add_argument("address", help="0x-prefixed address")
    p.add_argument("claimed_score", type=int, help="Claimed score")
    p.add_argument("file", help="Live signals JSON file (- for stdin)")
    p.add_argument("--salt-version", help="Override salt version")
    p.add_argument("-k", "--oracle-key", help="File holding the oracle's hex private key; signs the result")

    # badges
    p = sub.add_parser("badges", help="Badge eligibility")
    p.add_argument("file", help="Badge context JSON file (- for stdin)")
    p.add_argument("--now", type=int, default=None, help="Evaluation time (epoch seconds)")

    # eligibility
    p = sub.add_parser("eligibility", help="Airdrop eligibility")
    p.add_argument("criteria", help="Criteria JSON file")
    p.add_argument("user", help="User attributes JSON file (- for stdin)")

    return parser


def main(argv: Optional[list[str]] = None) -> Optional[dict]:
    """CLI entry point. Returns result dict for testing."""
    from shinroe.config import load_settings
    from shinroe.log import setup_structured_logging

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "score": cmd_score,
        "tier": cmd_tier,
        "decay": cmd_decay,
        "salt": cmd_salt,
        "commit": cmd_commit,
        "verify": cmd_verify,
        "badges": cmd_badges,
        "eligibility": cmd_eligibility,
    }

    try:
        setup_structured_logging(args.log_level or load_settings().log_level)
        return commands[args.command](args)
    except FileNotFoundError as e:
        print(f"❌ File not found: {e}", file=sys.stderr)
        sys.exit(1)
    except (ShinroeError, ValueError, json.JSONDecodeError) as e:
        logger.debug("Command %s failed: %s", args.command, e)
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

"""shinroe.config — Environment-driven settings.

Every setting has a default so the engine runs unconfigured. The salt
version is the one setting with system-wide consequences: changing it
invalidates every score commitment issued under the previous version.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError

DEFAULT_SALT_VERSION = "shinroe-salt-v1"
DEFAULT_VERIFY_TOLERANCE = 0.05
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    salt_version: str = DEFAULT_SALT_VERSION
    verify_tolerance: float = DEFAULT_VERIFY_TOLERANCE
    early_adopter_cutoff: Optional[int] = None  # epoch seconds; None = moving window
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from ``env`` (defaults to ``os.environ``)."""
    if env is None:
        env = os.environ

    salt_version = env.get("SHINROE_SALT_VERSION", DEFAULT_SALT_VERSION).strip()
    if not salt_version:
        raise ConfigError("SHINROE_SALT_VERSION must not be empty")

    raw_tolerance = env.get("SHINROE_VERIFY_TOLERANCE", str(DEFAULT_VERIFY_TOLERANCE))
    try:
        tolerance = float(raw_tolerance)
    except ValueError:
        raise ConfigError(f"SHINROE_VERIFY_TOLERANCE is not a number: {raw_tolerance!r}")
    if not 0.0 <= tolerance <= 1.0:
        raise ConfigError(f"SHINROE_VERIFY_TOLERANCE out of range [0, 1]: {tolerance}")

    cutoff = None
    raw_cutoff = env.get("SHINROE_EARLY_ADOPTER_CUTOFF", "").strip()
    if raw_cutoff:
        try:
            cutoff = int(raw_cutoff)
        except ValueError:
            raise ConfigError(f"SHINROE_EARLY_ADOPTER_CUTOFF is not an epoch timestamp: {raw_cutoff!r}")

    log_level = env.get("SHINROE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    return Settings(
        salt_version=salt_version,
        verify_tolerance=tolerance,
        early_adopter_cutoff=cutoff,
        log_level=log_level,
    )

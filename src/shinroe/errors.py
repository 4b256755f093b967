"""shinroe.errors — Exception types raised at the engine's boundaries.

Scoring, decay and eligibility are total over their documented inputs and
never raise. These exceptions signal caller contract violations only:
malformed addresses, payloads that fail validation, or bad configuration.
A failed score verification is a ``False`` result, never an exception.
"""

from typing import Optional


class ShinroeError(Exception):
    """Base class for all shinroe errors."""


class InvalidAddressError(ShinroeError, ValueError):
    """Address is not a 20-byte hex string."""

    def __init__(self, address):
        self.address = address
        super().__init__(f"Invalid address: {address!r}")


class SignalValidationError(ShinroeError, ValueError):
    """Inbound payload failed boundary validation."""

    def __init__(self, message: str, errors: Optional[list] = None):
        self.errors = errors or []
        super().__init__(message)


class ConfigError(ShinroeError):
    """Environment configuration could not be parsed."""

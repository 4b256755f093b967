"""
shinroe.schemas — Boundary validation for inbound payloads.

The engine assumes pre-validated input. Anything arriving as JSON (CLI
files, collaborator payloads) passes through these models first: negative
counts, out-of-range KYC levels and malformed addresses are rejected here
with a ``SignalValidationError`` instead of reaching the scorer.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .badges import parse_badge
from .commitment import is_valid_address
from .eligibility import BadgeContext, BadgeRequirement, EligibilityCriteria, UserAttributes
from .errors import SignalValidationError
from .scoring import IdentitySignals, UserSignals


class IdentitySignalsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kyc_level: int = Field(0, ge=0, le=3)
    account_age_days: int = Field(0, ge=0)
    verified_email: bool = False
    verified_phone: bool = False
    profile_complete: bool = False


class UserSignalsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    is_verified: bool = False
    badge_types: list[int] = Field(default_factory=list)
    account_age_days: int = Field(0, ge=0)
    transaction_count: int = Field(0, ge=0)
    endorsement_weight: float = Field(0, ge=0, allow_inf_nan=False)
    endorsement_count: int = Field(0, ge=0)
    unique_counterparties: int = Field(0, ge=0)
    on_chain_age_days: int = Field(0, ge=0)
    identity_signals: Optional[IdentitySignalsModel] = None

    @field_validator("badge_types")
    @classmethod
    def badges_non_negative(cls, v: list[int]) -> list[int]:
        if any(b < 0 for b in v):
            raise ValueError("badge types must be non-negative")
        return v

    def to_signals(self) -> UserSignals:
        identity = None
        if self.identity_signals is not None:
            identity = IdentitySignals(**self.identity_signals.model_dump())
        return UserSignals(
            is_verified=self.is_verified,
            badge_types=frozenset(self.badge_types),
            account_age_days=self.account_age_days,
            transaction_count=self.transaction_count,
            endorsement_weight=self.endorsement_weight,
            endorsement_count=self.endorsement_count,
            unique_counterparties=self.unique_counterparties,
            on_chain_age_days=self.on_chain_age_days,
            identity_signals=identity,
        )


class EligibilityCriteriaModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    min_score: int = Field(0, ge=0)
    required_badges: list[int] = Field(default_factory=list)
    badge_requirement: Literal["any", "all"] = "any"
    min_endorsement_weight: int = Field(0, ge=0)
    requires_registration: bool = False

    @field_validator("required_badges")
    @classmethod
    def required_badges_non_negative(cls, v: list[int]) -> list[int]:
        if any(b < 0 for b in v):
            raise ValueError("required badges must be non-negative")
        return v

    def to_criteria(self) -> EligibilityCriteria:
        return EligibilityCriteria(
            min_score=self.min_score,
            required_badges=tuple(parse_badge(b) for b in self.required_badges),
            badge_requirement=BadgeRequirement(self.badge_requirement),
            min_endorsement_weight=self.min_endorsement_weight,
            requires_registration=self.requires_registration,
        )


class UserAttributesModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    address: str = ""
    score: int = Field(0, ge=0, le=1000)
    badges: list[int] = Field(default_factory=list)
    endorsement_weight: int = Field(0, ge=0)
    is_registered: bool = False

    @field_validator("address")
    @classmethod
    def address_format(cls, v: str) -> str:
        if v and not is_valid_address(v):
            raise ValueError("address must be 0x followed by 40 hex characters")
        return v.lower()

    def to_attributes(self) -> UserAttributes:
        return UserAttributes(
            score=self.score,
            badges=frozenset(self.badges),
            endorsement_weight=self.endorsement_weight,
            is_registered=self.is_registered,
            address=self.address,
        )


class BadgeContextModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    identity_linked: bool = False
    endorsements_given: int = Field(0, ge=0)
    endorsements_received: int = Field(0, ge=0)
    is_registered: bool = False
    registered_at: Optional[int] = Field(None, ge=0)
    overall_score: int = Field(0, ge=0, le=1000)

    def to_context(self) -> BadgeContext:
        return BadgeContext(**self.model_dump())


def _parse(model: type[BaseModel], data, what: str):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "<root>" for err in errors)
        raise SignalValidationError(f"Invalid {what}: {fields}", errors=errors) from e


def parse_user_signals(data) -> UserSignals:
    return _parse(UserSignalsModel, data, "user signals").to_signals()


def parse_criteria(data) -> EligibilityCriteria:
    return _parse(EligibilityCriteriaModel, data, "eligibility criteria").to_criteria()


def parse_user_attributes(data) -> UserAttributes:
    return _parse(UserAttributesModel, data, "user attributes").to_attributes()


def parse_badge_context(data) -> BadgeContext:
    return _parse(BadgeContextModel, data, "badge context").to_context()

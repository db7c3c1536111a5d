"""Grant decision produced by the validation gate."""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional


class Outcome(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"


class DenialReason(str, Enum):
    INVALID_CLIENT = "INVALID_CLIENT"
    MISSING_KEY = "MISSING_KEY"
    INVALID_KEY = "INVALID_KEY"
    KEY_EXPIRED = "KEY_EXPIRED"
    DEVICE_MISMATCH = "DEVICE_MISMATCH"
    FETCH_FAILURE = "FETCH_FAILURE"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class IdentityClaims:
    """Identity echoed into the script preamble on a grant."""

    fingerprint: str
    premium: bool = False
    owner_identity: Optional[str] = None
    display_name: Optional[str] = None
    note: Optional[str] = None
    key_type: Optional[str] = None
    # None when the key never expires
    remaining: Optional[timedelta] = None


@dataclass(frozen=True)
class GrantDecision:
    outcome: Outcome
    denial_reason: Optional[DenialReason] = None
    identity_claims: Optional[IdentityClaims] = None

    def __post_init__(self):
        if self.outcome is Outcome.GRANTED:
            if self.identity_claims is None or self.denial_reason is not None:
                raise ValueError("A grant carries identity claims and no denial reason")
        elif self.denial_reason is None or self.identity_claims is not None:
            raise ValueError("A denial carries a reason and no identity claims")

    @classmethod
    def grant(cls, claims: IdentityClaims) -> "GrantDecision":
        return cls(outcome=Outcome.GRANTED, identity_claims=claims)

    @classmethod
    def deny(cls, reason: DenialReason) -> "GrantDecision":
        return cls(outcome=Outcome.DENIED, denial_reason=reason)

    @property
    def granted(self) -> bool:
        return self.outcome is Outcome.GRANTED

"""
Ledger Models
=============

Records held by the credential registry and the policy verifier, and the
events they emit.

Version: 0.1.0
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from noah.circuit.models import SLOT_COUNT, pad_slots


class LedgerEventType(str, Enum):
    """Types of ledger events."""

    CREDENTIAL_ISSUED = "credential_issued"
    CREDENTIAL_REVOKED = "credential_revoked"
    NULLIFIER_REGISTERED = "nullifier_registered"
    REQUIREMENTS_SET = "requirements_set"
    ACCESS_GRANTED = "access_granted"
    ACCESS_REVOKED = "access_revoked"


class LedgerEvent(BaseModel):
    """An event emitted by a successful state transition."""

    event_type: LedgerEventType
    tx_hash: str = Field(..., description="Mock transaction hash")
    block_number: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    payload: dict[str, Any] = Field(default_factory=dict)


class CredentialStatus(str, Enum):
    """Credential lifecycle state."""

    ACTIVE = "active"
    REVOKED = "revoked"


class CredentialRecord(BaseModel):
    """A credential hash registered by a trusted issuer."""

    model_config = ConfigDict(frozen=True)

    credential_hash: str
    issuer: str
    user: str
    status: CredentialStatus = CredentialStatus.ACTIVE
    registered_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    revoked_at: datetime | None = None

    @property
    def revoked(self) -> bool:
        return self.status == CredentialStatus.REVOKED


class CredentialStatusView(BaseModel):
    """Issuer-facing credential status."""

    credential_hash: str
    is_valid: bool
    is_revoked: bool
    issuer: str | None = None


class Requirements(BaseModel):
    """
    A relying party's policy.

    ``allowed_jurisdictions`` holds only the active codes; its length is the
    explicit active count and the fixed-size view is ``padded_jurisdictions``.
    """

    model_config = ConfigDict(frozen=True)

    min_age: int = Field(default=0, ge=0)
    allowed_jurisdictions: tuple[int, ...] = Field(default=(), max_length=SLOT_COUNT)
    require_accredited: bool = False
    is_set: bool = False

    def padded_jurisdictions(self) -> list[int]:
        """Jurisdictions padded to the fixed slot count with the sentinel."""
        return pad_slots(list(self.allowed_jurisdictions))


class AccessGrant(BaseModel):
    """Access state for a (relying party, user) pair."""

    model_config = ConfigDict(frozen=True)

    granted: bool = False
    credential_hash: str | None = None
    granted_at: datetime | None = None

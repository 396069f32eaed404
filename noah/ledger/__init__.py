"""
Ledger Module
=============

Credential registry, policy verifier and their composition.

Usage:
    from noah.ledger import get_ledger

    ledger = get_ledger()
    ledger.verifier.verify_and_grant_access(protocol, proof, signals, credential_hash, user)

Version: 0.1.0
"""

from noah.ledger.errors import (
    AccessNotGranted,
    ComplianceFlagFailure,
    FreshnessViolation,
    IdentityConflict,
    InvalidCredential,
    InvalidRequirements,
    NoahError,
    PolicyMismatch,
    PolicyNotSet,
    ProofRejected,
    RegistryConflict,
    UnauthorizedCaller,
)
from noah.ledger.events import EventLog
from noah.ledger.ledger import Ledger, get_ledger, reset_ledger, set_ledger
from noah.ledger.models import (
    AccessGrant,
    CredentialRecord,
    CredentialStatus,
    CredentialStatusView,
    LedgerEvent,
    LedgerEventType,
    Requirements,
)
from noah.ledger.registry import CredentialRegistry, IssuerDirectory, StaticIssuerDirectory
from noah.ledger.verifier import PolicyVerifier


__all__ = [
    # Composition
    "Ledger",
    "get_ledger",
    "set_ledger",
    "reset_ledger",
    "CredentialRegistry",
    "IssuerDirectory",
    "StaticIssuerDirectory",
    "PolicyVerifier",
    "EventLog",
    # Models
    "AccessGrant",
    "CredentialRecord",
    "CredentialStatus",
    "CredentialStatusView",
    "LedgerEvent",
    "LedgerEventType",
    "Requirements",
    # Errors
    "NoahError",
    "PolicyNotSet",
    "InvalidCredential",
    "ProofRejected",
    "PolicyMismatch",
    "ComplianceFlagFailure",
    "FreshnessViolation",
    "IdentityConflict",
    "RegistryConflict",
    "UnauthorizedCaller",
    "InvalidRequirements",
    "AccessNotGranted",
]

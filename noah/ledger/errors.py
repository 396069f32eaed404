"""
Ledger Errors
=============

Structured exceptions raised by the credential registry and the policy
verifier. Every failure mode carries a stable string ``code`` so integrators
can branch on it without string-matching messages; checks that share a
class (e.g. the equality checks behind ``PolicyMismatch``) also name the
failed ``check`` in ``context``.

A raised error always means the whole call was rejected with no state
written.
"""

from typing import Any, Mapping


class NoahError(Exception):
    """
    Base class for ledger exceptions.

    Args:
        message: Human-readable description
        context: Optional structured fields (small dict)
    """

    code = "NOAH_ERROR"

    def __init__(self, message: str, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context) if context else {}

    def __str__(self) -> str:
        tail = f" context={self.context}" if self.context else ""
        return f"[{self.code}] {self.message}{tail}"

    @property
    def check(self) -> str | None:
        """Name of the failed verification check, when applicable."""
        return self.context.get("check")

    def to_dict(self) -> dict[str, Any]:
        """Structured view suitable for logs or API error bodies."""
        out: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.context:
            out["context"] = self.context
        return out


class PolicyNotSet(NoahError):
    """The calling relying party has no active policy."""

    code = "POLICY_NOT_SET"


class InvalidCredential(NoahError):
    """Credential hash is unknown or revoked."""

    code = "INVALID_CREDENTIAL"


class ProofRejected(NoahError):
    """The backend rejected the proof, or the proof reports isValid=0."""

    code = "PROOF_REJECTED"


class PolicyMismatch(NoahError):
    """A public signal disagrees with the policy or the binding values."""

    code = "POLICY_MISMATCH"


class ComplianceFlagFailure(NoahError):
    """A required packedFlags bit is unset (expired, sanctioned or under age)."""

    code = "COMPLIANCE_FLAG_FAILURE"


class FreshnessViolation(NoahError):
    """The proof's currentDate is outside the freshness window."""

    code = "FRESHNESS_VIOLATION"


class IdentityConflict(NoahError):
    """The nullifier is already bound to a different wallet."""

    code = "IDENTITY_CONFLICT"


class RegistryConflict(NoahError):
    """Duplicate registration, or a transition out of the revoked state."""

    code = "REGISTRY_CONFLICT"


class UnauthorizedCaller(NoahError):
    """Caller lacks the issuer or admin standing the operation requires."""

    code = "UNAUTHORIZED_CALLER"


class InvalidRequirements(NoahError):
    """A relying party submitted a policy that cannot be represented."""

    code = "INVALID_REQUIREMENTS"


class AccessNotGranted(NoahError):
    """Access revocation for a user that holds no grant."""

    code = "ACCESS_NOT_GRANTED"

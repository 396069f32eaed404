"""
Policy Verifier
===============

Per-relying-party policies and access grants.

``verify_and_grant_access`` is the core transition. It runs twelve ordered
checks and writes nothing unless every one passes:

    1.  caller has a policy                         PolicyNotSet
    2.  credential hash is active                   InvalidCredential
    3.  backend accepts the proof                   ProofRejected(backend)
    4.  isValid == 1                                ProofRejected(is_valid)
    5.  minAge == policy minAge                     PolicyMismatch(min_age)
    6.  jurisdiction slots == padded policy list    PolicyMismatch(jurisdictions)
    7.  requireAccredited == policy flag            PolicyMismatch(accredited)
    8.  userAddress == user                         PolicyMismatch(user_address)
    9.  credentialHash == low 60 bits of the hash   PolicyMismatch(credential_hash)
    10. VALID_EXPIRY and NOT_SANCTIONED flags set   ComplianceFlagFailure(expiry_sanctions)
    11. OVER_21 / OVER_18 flag for the policy age   ComplianceFlagFailure(age_threshold)
    12. now - window <= currentDate <= now          FreshnessViolation

The nullifier is then registered (IdentityConflict if bound elsewhere) and
access is granted.

Version: 0.1.0
"""

import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from pydantic import ValidationError

from noah.circuit.models import OVER_18_THRESHOLD, OVER_21_THRESHOLD, SLOT_COUNT, PackedFlags
from noah.circuit.signals import PublicSignals
from noah.config import settings
from noah.identity.credentials import (
    address_to_int,
    normalize_address,
    normalize_credential_hash,
    truncate_credential_hash,
)
from noah.identity.jurisdiction import jurisdiction_codes
from noah.ledger.errors import (
    AccessNotGranted,
    ComplianceFlagFailure,
    FreshnessViolation,
    InvalidCredential,
    InvalidRequirements,
    PolicyMismatch,
    PolicyNotSet,
    ProofRejected,
)
from noah.ledger.events import EventLog
from noah.ledger.models import AccessGrant, LedgerEventType, Requirements
from noah.ledger.registry import CredentialRegistry
from noah.logging import get_logger
from noah.zk.backend import ProofBackend
from noah.zk.models import Groth16Proof


logger = get_logger(__name__)


def _system_clock() -> int:
    return int(time.time())


class PolicyVerifier:
    """
    Relying-party policies and proof-gated access.

    Usage:
        verifier = PolicyVerifier(registry, backend, backend.verifying_key)
        verifier.set_requirements(protocol, 18, ["US", "CA"], False)
        verifier.verify_and_grant_access(protocol, proof, signals, credential_hash, user)
        verifier.check_access(protocol, user)  # True
    """

    def __init__(
        self,
        registry: CredentialRegistry,
        backend: ProofBackend,
        verifying_key: bytes,
        *,
        freshness_window_seconds: int | None = None,
        clock: Callable[[], int] | None = None,
        events: EventLog | None = None,
    ) -> None:
        self.registry = registry
        self.backend = backend
        self.verifying_key = verifying_key
        self.freshness_window_seconds = (
            freshness_window_seconds
            if freshness_window_seconds is not None
            else settings.ledger.freshness_window_seconds
        )
        self.clock = clock or _system_clock
        self.events = events if events is not None else registry.events

        self._requirements: dict[str, Requirements] = {}
        self._access: dict[tuple[str, str], AccessGrant] = {}

        logger.debug(
            "policy_verifier_initialized",
            backend=backend.name,
            freshness_window_seconds=self.freshness_window_seconds,
        )

    # =========================================================================
    # Policies
    # =========================================================================

    def set_requirements(
        self,
        caller: str,
        min_age: int,
        jurisdictions: Sequence[str | int],
        require_accredited: bool,
    ) -> Requirements:
        """
        Create or overwrite the caller's policy.

        Args:
            caller: Relying party address
            min_age: Minimum age; 0 disables the age threshold
            jurisdictions: Allowed jurisdiction identifiers or numeric codes, in order
            require_accredited: Whether accredited investor status is required

        Raises:
            InvalidRequirements: If more than 10 jurisdictions are given, a
                code is out of range, or ``min_age`` is negative
        """
        caller = normalize_address(caller)

        if len(jurisdictions) > SLOT_COUNT:
            raise InvalidRequirements(
                f"At most {SLOT_COUNT} jurisdictions allowed",
                context={"count": len(jurisdictions)},
            )
        if isinstance(min_age, bool) or min_age < 0:
            raise InvalidRequirements("min_age must be a non-negative integer", context={"min_age": min_age})

        try:
            codes = jurisdiction_codes(list(jurisdictions))
        except ValueError as e:
            raise InvalidRequirements(str(e)) from e

        requirements = Requirements(
            min_age=min_age,
            allowed_jurisdictions=tuple(codes),
            require_accredited=bool(require_accredited),
            is_set=True,
        )
        self._requirements[caller] = requirements

        self.events.emit(
            LedgerEventType.REQUIREMENTS_SET,
            protocol=caller,
            min_age=min_age,
            jurisdiction_count=len(codes),
            require_accredited=requirements.require_accredited,
        )
        logger.info(
            "requirements_set",
            protocol=caller,
            min_age=min_age,
            jurisdiction_count=len(codes),
            require_accredited=requirements.require_accredited,
        )

        return requirements

    def get_requirements(self, protocol: str) -> Requirements:
        """The protocol's policy, or an unset default."""
        return self._requirements.get(normalize_address(protocol), Requirements())

    # =========================================================================
    # Verification
    # =========================================================================

    def verify_and_grant_access(
        self,
        caller: str,
        proof: Groth16Proof,
        public_signals: Sequence[int | str] | PublicSignals,
        credential_hash: str,
        user: str,
    ) -> AccessGrant:
        """
        Verify a proof against the caller's policy and grant ``user`` access.

        Args:
            caller: Relying party address
            proof: Groth16 proof
            public_signals: The 28 public signals
            credential_hash: Full 0x-prefixed credential hash
            user: Wallet the proof is bound to

        Returns:
            The new AccessGrant

        Raises:
            ValueError: If the signal vector or an address is malformed
            NoahError: The first failed check, see module docstring
        """
        caller = normalize_address(caller)
        user = normalize_address(user)
        if isinstance(public_signals, PublicSignals):
            signals = public_signals
        else:
            signals = PublicSignals.from_list(public_signals)

        log = logger.bind(protocol=caller, user=user)

        # 1
        requirements = self._requirements.get(caller)
        if requirements is None or not requirements.is_set:
            raise PolicyNotSet("Requirements not set", context={"protocol": caller})

        # 2
        if not self.registry.is_credential_valid(credential_hash):
            raise InvalidCredential(
                "Invalid or revoked credential",
                context={"credential_hash": credential_hash},
            )

        # 3
        try:
            accepted = self.backend.verify(self.verifying_key, proof, signals.to_list())
        except (ValueError, ValidationError, RuntimeError, OSError) as e:
            log.warning("proof_backend_error", error=str(e))
            raise ProofRejected("Proof backend failed", context={"check": "backend"}) from e
        if not accepted:
            raise ProofRejected("Invalid ZK proof", context={"check": "backend"})

        # 4
        if signals.is_valid != 1:
            raise ProofRejected("Proof reports isValid=0", context={"check": "is_valid"})

        # 5
        if signals.min_age != requirements.min_age:
            raise PolicyMismatch(
                "Age requirement mismatch",
                context={"check": "min_age", "expected": requirements.min_age, "actual": signals.min_age},
            )

        # 6
        expected_slots = requirements.padded_jurisdictions()
        for slot, (actual, expected) in enumerate(zip(signals.allowed_jurisdictions, expected_slots)):
            if actual != expected:
                raise PolicyMismatch(
                    "Jurisdiction mismatch",
                    context={"check": "jurisdictions", "slot": slot},
                )

        # 7
        if signals.require_accredited != int(requirements.require_accredited):
            raise PolicyMismatch(
                "Accreditation requirement mismatch",
                context={"check": "accredited"},
            )

        # 8
        if signals.user_address != address_to_int(user):
            raise PolicyMismatch("Address mismatch", context={"check": "user_address"})

        # 9
        if signals.credential_hash != truncate_credential_hash(credential_hash):
            raise PolicyMismatch("Credential hash mismatch", context={"check": "credential_hash"})

        # 10
        if not signals.has_flags(PackedFlags.VALID_EXPIRY | PackedFlags.NOT_SANCTIONED):
            raise ComplianceFlagFailure(
                "Credential expired or holder sanctioned",
                context={"check": "expiry_sanctions", "packed_flags": signals.packed_flags},
            )

        # 11
        if requirements.min_age >= OVER_21_THRESHOLD:
            if not signals.has_flags(PackedFlags.OVER_21):
                raise ComplianceFlagFailure(
                    "Must be over 21",
                    context={"check": "age_threshold", "packed_flags": signals.packed_flags},
                )
        elif requirements.min_age >= OVER_18_THRESHOLD:
            if not signals.has_flags(PackedFlags.OVER_18):
                raise ComplianceFlagFailure(
                    "Must be over 18",
                    context={"check": "age_threshold", "packed_flags": signals.packed_flags},
                )

        # 12
        now = self.clock()
        if signals.current_date > now or signals.current_date < now - self.freshness_window_seconds:
            raise FreshnessViolation(
                "Proof timestamp outside the freshness window",
                context={"current_date": signals.current_date, "now": now},
            )

        self.registry.register_nullifier(signals.nullifier, credential_hash, user)

        grant = AccessGrant(
            granted=True,
            credential_hash=normalize_credential_hash(credential_hash),
            granted_at=datetime.now(UTC),
        )
        self._access[(caller, user)] = grant

        self.events.emit(
            LedgerEventType.ACCESS_GRANTED,
            protocol=caller,
            user=user,
            nullifier=str(signals.nullifier),
        )
        log.info("access_granted", nullifier=str(signals.nullifier))

        return grant

    # =========================================================================
    # Access
    # =========================================================================

    def check_access(self, caller: str, user: str) -> bool:
        """Whether ``user`` holds access at the calling protocol."""
        return self.has_access(caller, user)

    def has_access(self, protocol: str, user: str) -> bool:
        """Whether ``user`` holds access at ``protocol``."""
        return self.access_grant(protocol, user).granted

    def access_grant(self, protocol: str, user: str) -> AccessGrant:
        """Access state for a (protocol, user) pair."""
        key = (normalize_address(protocol), normalize_address(user))
        return self._access.get(key, AccessGrant())

    def revoke_access(self, caller: str, user: str) -> AccessGrant:
        """
        Clear ``user``'s access at the calling protocol.

        The nullifier binding and the recorded credential hash are kept, so
        the user can be granted again.

        Raises:
            AccessNotGranted: If the user does not currently hold access
        """
        caller = normalize_address(caller)
        user = normalize_address(user)

        grant = self._access.get((caller, user))
        if grant is None or not grant.granted:
            raise AccessNotGranted("User does not have access", context={"protocol": caller, "user": user})

        grant = grant.model_copy(update={"granted": False})
        self._access[(caller, user)] = grant

        self.events.emit(LedgerEventType.ACCESS_REVOKED, protocol=caller, user=user)
        logger.info("access_revoked", protocol=caller, user=user)

        return grant

    # =========================================================================
    # Test Utilities
    # =========================================================================

    def get_stats(self) -> dict[str, int]:
        """Get policy and access statistics."""
        return {
            "policies": len(self._requirements),
            "active_grants": sum(1 for g in self._access.values() if g.granted),
        }

    def clear_all(self) -> None:
        """Clear all policies and grants (for testing)."""
        self._requirements.clear()
        self._access.clear()
        logger.debug("policy_verifier_cleared")

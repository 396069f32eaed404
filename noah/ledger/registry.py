"""
Credential Registry
===================

Global store of credential validity, issuer attribution and
nullifier-to-wallet bindings.

Per credential hash the lifecycle is::

    absent --(trusted issuer registers)--> active[issuer]
           --(issuer or admin revokes)--> revoked      (terminal)

A nullifier is bound to the wallet of the first successful verification that
references it and never rebinds. The registry is shared by every relying
party: one party's verification consumes the nullifier for all of them.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import UTC, datetime

from noah.identity.credentials import normalize_address, normalize_credential_hash
from noah.ledger.errors import (
    IdentityConflict,
    InvalidCredential,
    RegistryConflict,
    UnauthorizedCaller,
)
from noah.ledger.events import EventLog
from noah.ledger.models import (
    CredentialRecord,
    CredentialStatus,
    CredentialStatusView,
    LedgerEventType,
)
from noah.logging import get_logger


logger = get_logger(__name__)


class IssuerDirectory(ABC):
    """Source of truth for which wallets may issue credentials."""

    @abstractmethod
    def is_trusted(self, address: str) -> bool:
        """True if ``address`` is a trusted issuer."""
        ...


class StaticIssuerDirectory(IssuerDirectory):
    """Fixed set of trusted issuers, typically loaded from settings."""

    def __init__(self, issuers: Iterable[str] = ()) -> None:
        self._issuers = frozenset(normalize_address(a) for a in issuers)

    def is_trusted(self, address: str) -> bool:
        return address.lower() in self._issuers

    def __len__(self) -> int:
        return len(self._issuers)


class CredentialRegistry:
    """
    Registry of issued credentials and identity nullifiers.

    Usage:
        registry = CredentialRegistry(admin="0x...", issuers=StaticIssuerDirectory([issuer]))
        registry.register_credential(issuer, credential_hash, user)
        registry.is_credential_valid(credential_hash)  # True
    """

    def __init__(
        self,
        admin: str,
        issuers: IssuerDirectory,
        events: EventLog | None = None,
    ) -> None:
        self.admin = normalize_address(admin)
        self.issuers = issuers
        self.events = events if events is not None else EventLog()

        self._credentials: dict[str, CredentialRecord] = {}
        self._nullifiers: dict[int, str] = {}

        logger.debug("credential_registry_initialized", admin=self.admin)

    # =========================================================================
    # Credentials
    # =========================================================================

    def register_credential(self, caller: str, credential_hash: str, user: str) -> CredentialRecord:
        """
        Register a credential hash issued to ``user``.

        Raises:
            UnauthorizedCaller: If ``caller`` is not a trusted issuer
            RegistryConflict: If the hash was ever registered (active or revoked)
        """
        caller = normalize_address(caller)
        user = normalize_address(user)
        key = normalize_credential_hash(credential_hash)

        if not self.issuers.is_trusted(caller):
            raise UnauthorizedCaller(
                "Caller is not a trusted issuer",
                context={"caller": caller},
            )
        if key in self._credentials:
            raise RegistryConflict(
                "Credential already registered",
                context={"credential_hash": key, "status": self._credentials[key].status.value},
            )

        record = CredentialRecord(credential_hash=key, issuer=caller, user=user)
        self._credentials[key] = record

        self.events.emit(
            LedgerEventType.CREDENTIAL_ISSUED,
            user=user,
            credential_hash=key,
            issuer=caller,
        )
        logger.info("credential_registered", credential_hash=key, issuer=caller, user=user)

        return record

    def revoke_credential(self, caller: str, credential_hash: str) -> CredentialRecord:
        """
        Revoke a credential. Revocation is permanent.

        Raises:
            InvalidCredential: If the hash was never registered
            UnauthorizedCaller: If ``caller`` is neither the original issuer nor the admin
            RegistryConflict: If the credential is already revoked
        """
        caller = normalize_address(caller)
        key = normalize_credential_hash(credential_hash)

        record = self._credentials.get(key)
        if record is None:
            raise InvalidCredential("Credential not found", context={"credential_hash": key})
        if caller not in (record.issuer, self.admin):
            raise UnauthorizedCaller(
                "Only the issuing party or the admin may revoke",
                context={"caller": caller, "credential_hash": key},
            )
        if record.revoked:
            raise RegistryConflict("Credential already revoked", context={"credential_hash": key})

        record = record.model_copy(update={"status": CredentialStatus.REVOKED, "revoked_at": datetime.now(UTC)})
        self._credentials[key] = record

        self.events.emit(
            LedgerEventType.CREDENTIAL_REVOKED,
            credential_hash=key,
            revoked_by=caller,
        )
        logger.info("credential_revoked", credential_hash=key, revoked_by=caller)

        return record

    def is_credential_valid(self, credential_hash: str) -> bool:
        """True iff the hash is registered and not revoked."""
        try:
            key = normalize_credential_hash(credential_hash)
        except ValueError:
            return False
        record = self._credentials.get(key)
        return record is not None and not record.revoked

    def get_credential(self, credential_hash: str) -> CredentialRecord | None:
        """Look up a credential record."""
        return self._credentials.get(normalize_credential_hash(credential_hash))

    def credential_status(self, credential_hash: str) -> CredentialStatusView:
        """Issuer-facing status of a credential hash."""
        key = normalize_credential_hash(credential_hash)
        record = self._credentials.get(key)
        if record is None:
            return CredentialStatusView(credential_hash=key, is_valid=False, is_revoked=False)
        return CredentialStatusView(
            credential_hash=key,
            is_valid=not record.revoked,
            is_revoked=record.revoked,
            issuer=record.issuer,
        )

    # =========================================================================
    # Nullifiers
    # =========================================================================

    def register_nullifier(self, nullifier: int, credential_hash: str, user: str) -> bool:
        """
        Bind ``nullifier`` to ``user``, or confirm an existing binding.

        Args:
            nullifier: Identity nullifier from the proof's public signals
            credential_hash: Credential the proof was made against
            user: Wallet the proof is bound to

        Returns:
            True if the nullifier was newly bound, False if it was already
            bound to ``user``

        Raises:
            InvalidCredential: If the credential is not active
            IdentityConflict: If the nullifier belongs to another wallet
        """
        user = normalize_address(user)

        if not self.is_credential_valid(credential_hash):
            raise InvalidCredential(
                "Credential is not active",
                context={"credential_hash": credential_hash},
            )

        owner = self._nullifiers.get(nullifier)
        if owner is not None:
            if owner != user:
                logger.warning(
                    "nullifier_identity_conflict",
                    nullifier=str(nullifier),
                    owner=owner,
                    user=user,
                )
                raise IdentityConflict(
                    "Nullifier is bound to a different wallet",
                    context={"nullifier": str(nullifier), "owner": owner, "user": user},
                )
            return False

        self._nullifiers[nullifier] = user

        self.events.emit(
            LedgerEventType.NULLIFIER_REGISTERED,
            nullifier=str(nullifier),
            user=user,
            credential_hash=normalize_credential_hash(credential_hash),
        )
        logger.info("nullifier_registered", nullifier=str(nullifier), user=user)

        return True

    def nullifier_owner(self, nullifier: int) -> str | None:
        """Wallet a nullifier is bound to, if any."""
        return self._nullifiers.get(nullifier)

    # =========================================================================
    # Test Utilities
    # =========================================================================

    def get_stats(self) -> dict[str, int]:
        """Get storage statistics."""
        revoked = sum(1 for r in self._credentials.values() if r.revoked)
        return {
            "credentials": len(self._credentials),
            "revoked_credentials": revoked,
            "nullifiers": len(self._nullifiers),
        }

    def clear_all(self) -> None:
        """Clear all registry data (for testing)."""
        self._credentials.clear()
        self._nullifiers.clear()
        logger.debug("credential_registry_cleared")

"""
Ledger
======

Composition of the credential registry, the policy verifier, the proof
backend and a shared event log. This is the state a deployment holds; the
HTTP service talks to one instance via ``get_ledger()``.

Version: 0.1.0
"""

from collections.abc import Callable
from typing import Any

from noah.config import LedgerMode, settings
from noah.ledger.events import EventLog
from noah.ledger.models import LedgerEvent, LedgerEventType
from noah.ledger.registry import CredentialRegistry, IssuerDirectory, StaticIssuerDirectory
from noah.ledger.verifier import PolicyVerifier
from noah.logging import get_logger
from noah.zk.backend import ProofBackend, get_proof_backend


logger = get_logger(__name__)


class Ledger:
    """
    In-process ledger holding the global registry and per-party policies.

    Usage:
        ledger = Ledger(admin=admin, issuers=StaticIssuerDirectory([issuer]))
        ledger.registry.register_credential(issuer, credential_hash, user)
        ledger.verifier.set_requirements(protocol, 18, ["US"], False)
    """

    def __init__(
        self,
        admin: str,
        issuers: IssuerDirectory,
        backend: ProofBackend | None = None,
        verifying_key: bytes | None = None,
        *,
        freshness_window_seconds: int | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.backend = backend or get_proof_backend()
        self.verifying_key = verifying_key if verifying_key is not None else self.backend.verifying_key
        self.event_log = EventLog()
        self.registry = CredentialRegistry(admin, issuers, events=self.event_log)
        self.verifier = PolicyVerifier(
            self.registry,
            self.backend,
            self.verifying_key,
            freshness_window_seconds=freshness_window_seconds,
            clock=clock,
            events=self.event_log,
        )

        logger.info(
            "ledger_initialized",
            admin=self.registry.admin,
            backend=self.backend.name,
        )

    def events(
        self,
        event_type: LedgerEventType | None = None,
        limit: int | None = None,
    ) -> list[LedgerEvent]:
        """Emitted events in order, optionally filtered by type."""
        return self.event_log.events(event_type, limit)

    def health_check(self) -> dict[str, Any]:
        """Report ledger status."""
        return {
            "status": "healthy",
            "block_number": self.event_log.block_number,
            "backend": self.backend.health_check(),
        }

    def get_stats(self) -> dict[str, int]:
        """Combined storage statistics."""
        return {
            **self.registry.get_stats(),
            **self.verifier.get_stats(),
            "events": len(self.event_log),
        }

    def clear_all(self) -> None:
        """Clear all ledger state (for testing)."""
        self.registry.clear_all()
        self.verifier.clear_all()
        self.event_log.clear()


# Global ledger instance
_ledger: Ledger | None = None


def get_ledger() -> Ledger:
    """
    Get the configured ledger instance.

    Returns:
        Ledger instance based on settings
    """
    global _ledger

    if _ledger is None:
        mode = settings.ledger.mode

        if mode == LedgerMode.MOCK:
            _ledger = Ledger(
                admin=settings.ledger.admin_address,
                issuers=StaticIssuerDirectory(settings.ledger.trusted_issuers_list),
            )
        elif mode in (LedgerMode.TESTNET, LedgerMode.MAINNET):
            raise NotImplementedError(
                f"Ledger mode '{mode.value}' not yet implemented. "
                "Use LEDGER_MODE=mock for development."
            )
        else:
            raise ValueError(f"Unknown ledger mode: {mode}")

        logger.info("ledger_ready", mode=mode.value)

    return _ledger


def set_ledger(ledger: Ledger) -> None:
    """Set a custom ledger (for testing)."""
    global _ledger
    _ledger = ledger


def reset_ledger() -> None:
    """Reset the ledger to be re-initialized."""
    global _ledger
    _ledger = None

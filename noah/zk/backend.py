"""
Proof Backend Interface
=======================

The proving system is an external oracle: it turns a witness into a proof
and checks a proof against a verifying key and the public signals. The
ledger depends only on this interface.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from noah.circuit.models import IdentityWitness, PublicParams
from noah.config import ProofBackendKind, settings
from noah.logging import get_logger
from noah.zk.models import Groth16Proof, ProofBundle


logger = get_logger(__name__)


class ProofGenerationError(RuntimeError):
    """Raised when the backend cannot produce a proof for a witness."""


class ProofBackend(ABC):
    """
    Abstract proving/verification oracle.

    Implements the Strategy pattern for different proving systems.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier."""
        ...

    @property
    @abstractmethod
    def verifying_key(self) -> bytes:
        """Verifying key matching the proving key in use."""
        ...

    @abstractmethod
    def prove(self, witness: IdentityWitness, params: PublicParams) -> ProofBundle:
        """
        Generate a proof for the witness under the public inputs.

        Args:
            witness: Private identity attributes
            params: Public policy and binding inputs

        Returns:
            ProofBundle with the proof and the 28 public signals

        Raises:
            ProofGenerationError: If no proof can be produced
        """
        ...

    @abstractmethod
    def verify(
        self,
        verifying_key: bytes,
        proof: Groth16Proof,
        public_signals: Sequence[int],
    ) -> bool:
        """
        Verify a proof.

        Args:
            verifying_key: Verifying key to check against
            proof: The Groth16 proof
            public_signals: The 28 public signals as integers

        Returns:
            True if the proof is valid for these signals
        """
        ...

    def health_check(self) -> dict[str, str]:
        """Report backend status."""
        return {"status": "healthy", "backend": self.name}


# Global backend instance
_backend: ProofBackend | None = None


def get_proof_backend() -> ProofBackend:
    """
    Get the configured proof backend instance.

    Returns:
        ProofBackend instance based on settings
    """
    global _backend

    if _backend is None:
        kind = settings.circuit.backend

        if kind == ProofBackendKind.MOCK:
            from noah.zk.mock import MockProofBackend

            _backend = MockProofBackend(
                settings.circuit.mock_verifying_key.get_secret_value().encode(),
            )
        elif kind == ProofBackendKind.GNARK:
            from noah.zk.gnark import GnarkProofBackend

            _backend = GnarkProofBackend(settings.circuit.build_dir)
        else:
            raise ValueError(f"Unknown proof backend: {kind}")

        logger.info("proof_backend_initialized", backend=_backend.name)

    return _backend


def set_proof_backend(backend: ProofBackend) -> None:
    """Set a custom proof backend."""
    global _backend
    _backend = backend
    logger.info("proof_backend_set", backend=backend.name)


def reset_proof_backend() -> None:
    """Reset the backend to be re-initialized."""
    global _backend
    _backend = None

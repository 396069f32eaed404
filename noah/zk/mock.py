"""
Mock Proof Backend
==================

In-process stand-in for the Groth16 prover/verifier, for development and
testing.

Proving evaluates the circuit directly. The "proof" is a set of field
elements derived by HMAC from the public signal vector under the verifying
key, so any change to a signal or to the key makes verification fail.

Version: 0.1.0
"""

import hashlib
import hmac
import time
from collections.abc import Sequence

from noah.circuit.circuit import KYCCircuit
from noah.circuit.models import CircuitOutputs, IdentityWitness, PublicParams
from noah.circuit.signals import SIGNAL_COUNT, PublicSignals
from noah.identity.hashing import FIELD_ORDER
from noah.logging import get_logger
from noah.zk.backend import ProofBackend, ProofGenerationError
from noah.zk.models import Groth16Proof, ProofBundle, ProofMetadata


logger = get_logger(__name__)

_POINT_LABELS = (b"a0", b"a1", b"b00", b"b01", b"b10", b"b11", b"c0", b"c1")


class MockProofBackend(ProofBackend):
    """
    HMAC-based mock of the proving system.

    Proofs are only valid under the verifying key they were produced with.
    """

    def __init__(self, verifying_key: bytes = b"noah-mock-verifying-key") -> None:
        if not verifying_key:
            raise ValueError("verifying_key must be non-empty")
        self._verifying_key = verifying_key
        self._circuit = KYCCircuit()
        self._proofs_generated = 0
        self._proofs_verified = 0

        logger.debug("mock_proof_backend_initialized")

    @property
    def name(self) -> str:
        return "mock"

    @property
    def verifying_key(self) -> bytes:
        return self._verifying_key

    def _points(self, key: bytes, signals: Sequence[int]) -> list[str]:
        message = b"".join(int(s).to_bytes(32, "big") for s in signals)
        return [
            str(int.from_bytes(hmac.new(key, label + message, hashlib.sha256).digest(), "big") % FIELD_ORDER)
            for label in _POINT_LABELS
        ]

    def _proof_for(self, key: bytes, signals: Sequence[int]) -> Groth16Proof:
        p = self._points(key, signals)
        return Groth16Proof(a=p[0:2], b=[p[2:4], p[4:6]], c=p[6:8])

    def prove(
        self,
        witness: IdentityWitness,
        params: PublicParams,
        claimed: CircuitOutputs | tuple[int, int, int] | None = None,
    ) -> ProofBundle:
        """
        Evaluate the circuit and issue a proof for its outputs.

        Args:
            witness: Private inputs
            params: Public inputs
            claimed: Optional claimed outputs; proving fails if the constraints
                do not admit them

        Raises:
            ProofGenerationError: If ``claimed`` contradicts the witness
        """
        start_time = time.time()

        if claimed is not None and not self._circuit.is_satisfied(witness, params, claimed):
            logger.warning("mock_proof_unsatisfiable", circuit=self._circuit.name)
            raise ProofGenerationError("Constraint system not satisfied by the claimed outputs")

        outputs = self._circuit.evaluate(witness, params)
        public_signals = PublicSignals.from_circuit(params, outputs)
        proof = self._proof_for(self._verifying_key, public_signals.to_list())

        proving_time_ms = int((time.time() - start_time) * 1000)
        self._proofs_generated += 1

        logger.info(
            "zk_proof_generated",
            circuit=self._circuit.name,
            backend=self.name,
            is_valid=outputs.is_valid,
            proving_time_ms=proving_time_ms,
        )

        return ProofBundle(
            proof=proof,
            public_signals=public_signals,
            metadata=ProofMetadata(
                circuit_name=self._circuit.name,
                backend=self.name,
                proving_time_ms=proving_time_ms,
            ),
        )

    def verify(
        self,
        verifying_key: bytes,
        proof: Groth16Proof,
        public_signals: Sequence[int],
    ) -> bool:
        """Recompute the proof points and compare in constant time."""
        self._proofs_verified += 1

        if len(public_signals) != SIGNAL_COUNT:
            logger.warning("zk_proof_signal_count_invalid", count=len(public_signals))
            return False

        try:
            presented = proof.to_calldata()
        except ValueError:
            logger.warning("zk_proof_malformed", backend=self.name)
            return False

        expected = self._proof_for(verifying_key, public_signals).to_calldata()
        valid = hmac.compare_digest(
            ",".join(map(str, expected)).encode(),
            ",".join(map(str, presented)).encode(),
        )

        logger.debug("zk_proof_verified", backend=self.name, valid=valid)
        return valid

    # =========================================================================
    # Test Utilities
    # =========================================================================

    def attest(self, public_signals: Sequence[int]) -> Groth16Proof:
        """
        Issue a proof for an arbitrary signal vector, bypassing the circuit.

        Exercises the verifier's checks that an honest circuit can never
        reach (e.g. isValid=1 with a compliance bit cleared).
        """
        return self._proof_for(self._verifying_key, list(public_signals))

    def get_stats(self) -> dict[str, int]:
        """Get usage statistics."""
        return {
            "proofs_generated": self._proofs_generated,
            "proofs_verified": self._proofs_verified,
        }

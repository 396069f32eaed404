"""
ZK-SNARK Integration Module
===========================

Proving backend abstraction for the KYC circuit.

Usage:
    from noah.zk import get_proof_backend

    backend = get_proof_backend()
    bundle = backend.prove(witness, params)
    ok = backend.verify(backend.verifying_key, bundle.proof, bundle.signal_list())

Version: 0.1.0
"""

from noah.zk.backend import (
    ProofBackend,
    ProofGenerationError,
    get_proof_backend,
    reset_proof_backend,
    set_proof_backend,
)
from noah.zk.mock import MockProofBackend
from noah.zk.models import Groth16Proof, ProofBundle, ProofMetadata


__all__ = [
    # Backends
    "ProofBackend",
    "MockProofBackend",
    "ProofGenerationError",
    "get_proof_backend",
    "set_proof_backend",
    "reset_proof_backend",
    # Models
    "Groth16Proof",
    "ProofBundle",
    "ProofMetadata",
]

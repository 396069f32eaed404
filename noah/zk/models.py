"""
ZK-SNARK Data Models
====================

Pydantic models for Groth16 proofs and proof bundles.

Version: 0.1.0
"""

import json
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from noah.circuit.signals import PublicSignals


class Groth16Proof(BaseModel):
    """
    A Groth16 proof over BN254.

    Points are decimal strings, matching the gnark JSON export.
    """

    a: list[str] = Field(..., min_length=2, max_length=2, description="Proof point A (G1)")
    b: list[list[str]] = Field(..., min_length=2, max_length=2, description="Proof point B (G2)")
    c: list[str] = Field(..., min_length=2, max_length=2, description="Proof point C (G1)")

    protocol: str = Field(default="groth16")
    curve: str = Field(default="bn254")

    def to_calldata(self) -> list[int]:
        """Convert to verifier calldata format (8 uint256)."""
        return [
            int(self.a[0]),
            int(self.a[1]),
            int(self.b[0][0]),
            int(self.b[0][1]),
            int(self.b[1][0]),
            int(self.b[1][1]),
            int(self.c[0]),
            int(self.c[1]),
        ]

    def to_hex(self) -> str:
        """Convert to hex string for storage."""
        return json.dumps(self.model_dump()).encode().hex()

    @classmethod
    def from_hex(cls, hex_str: str) -> "Groth16Proof":
        """Create from hex string."""
        data = json.loads(bytes.fromhex(hex_str).decode())
        return cls(**data)


class ProofMetadata(BaseModel):
    """Metadata about a generated proof."""

    circuit_name: str
    backend: str
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    proving_time_ms: int = Field(..., ge=0)


class ProofBundle(BaseModel):
    """A proof together with its public signals."""

    proof: Groth16Proof
    public_signals: PublicSignals
    metadata: ProofMetadata

    @property
    def nullifier(self) -> int:
        return self.public_signals.nullifier

    def signal_list(self) -> list[int]:
        return self.public_signals.to_list()

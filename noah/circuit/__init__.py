"""
KYC Predicate Circuit
=====================

Pure constraint computation mapping a private identity witness and public
policy parameters to the public outputs consumed by the verifier.

Usage:
    from noah.circuit import IdentityWitness, KYCCircuit, PublicParams, PublicSignals

    outputs = KYCCircuit().evaluate(witness, params)
    signals = PublicSignals.from_circuit(params, outputs)
"""

from noah.circuit.circuit import CIRCUIT_NAME, KYCCircuit
from noah.circuit.models import (
    ALL_FLAGS,
    EMPTY_SLOT,
    SLOT_COUNT,
    CircuitOutputs,
    IdentityWitness,
    PackedFlags,
    PublicParams,
    pad_slots,
)
from noah.circuit.nullifier import derive_nullifier, passport_number_to_field
from noah.circuit.signals import SIGNAL_COUNT, PublicSignals


__all__ = [
    # Circuit
    "KYCCircuit",
    "CIRCUIT_NAME",
    # Models
    "IdentityWitness",
    "PublicParams",
    "CircuitOutputs",
    "PackedFlags",
    "ALL_FLAGS",
    "PublicSignals",
    # Helpers
    "derive_nullifier",
    "passport_number_to_field",
    "pad_slots",
    # Constants
    "SLOT_COUNT",
    "EMPTY_SLOT",
    "SIGNAL_COUNT",
]

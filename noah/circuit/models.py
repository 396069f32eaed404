"""
Circuit Data Models
===================

Pydantic models for the private witness, the public inputs and the public
outputs of the KYC predicate circuit.

Every value is a BN254 scalar field element. Fixed-size lists hold exactly
``SLOT_COUNT`` entries; ``EMPTY_SLOT`` (0) marks an unused slot.

Version: 0.1.0
"""

from enum import IntFlag
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from noah.identity.hashing import FIELD_ORDER


SLOT_COUNT = 10
EMPTY_SLOT = 0

# Fixed disclosure thresholds, independent of any relying party's policy
OVER_18_THRESHOLD = 18
OVER_21_THRESHOLD = 21

FieldElement = Annotated[int, Field(ge=0, lt=FIELD_ORDER)]
Bit = Annotated[int, Field(ge=0, le=1)]
SlotList = Annotated[list[FieldElement], Field(min_length=SLOT_COUNT, max_length=SLOT_COUNT)]


class PackedFlags(IntFlag):
    """Bit layout of the ``packedFlags`` public output."""

    OVER_18 = 1
    OVER_21 = 2
    VALID_EXPIRY = 4
    NOT_SANCTIONED = 8


ALL_FLAGS = PackedFlags.OVER_18 | PackedFlags.OVER_21 | PackedFlags.VALID_EXPIRY | PackedFlags.NOT_SANCTIONED


def pad_slots(values: list[int]) -> list[int]:
    """Pad a list of active codes to ``SLOT_COUNT`` with the empty sentinel."""
    if len(values) > SLOT_COUNT:
        raise ValueError(f"At most {SLOT_COUNT} entries allowed, got {len(values)}")
    return list(values) + [EMPTY_SLOT] * (SLOT_COUNT - len(values))


class IdentityWitness(BaseModel):
    """Private inputs. Never leaves the prover."""

    model_config = ConfigDict(frozen=True)

    actual_age: FieldElement
    # Also the nationality tested against the sanctioned list
    actual_jurisdiction: FieldElement
    actual_accredited: Bit
    # Low 60 bits of the issuer's credential hash
    credential_hash: FieldElement
    # Identity seed for the nullifier
    passport_number: FieldElement
    expiry_date: FieldElement

    def __repr__(self) -> str:
        return "IdentityWitness(<private>)"

    __str__ = __repr__


class PublicParams(BaseModel):
    """Public inputs: the relying party's policy plus binding values."""

    model_config = ConfigDict(frozen=True)

    min_age: FieldElement
    allowed_jurisdictions: SlotList
    require_accredited: Bit
    credential_hash_public: FieldElement
    recipient_address: FieldElement
    current_date: FieldElement
    sanctioned_countries: SlotList = Field(default_factory=lambda: [EMPTY_SLOT] * SLOT_COUNT)


class CircuitOutputs(BaseModel):
    """
    Public outputs of the circuit.

    ``is_valid``, ``nullifier`` and ``packed_flags`` are published; the
    remaining predicate results are kept for diagnostics only.
    """

    model_config = ConfigDict(frozen=True)

    is_valid: Bit
    nullifier: FieldElement
    packed_flags: Annotated[int, Field(ge=0, le=int(ALL_FLAGS))]

    age_valid: Bit = 0
    jurisdiction_valid: Bit = 0
    hash_valid: Bit = 0
    accreditation_valid: Bit = 0
    expiry_valid: Bit = 0
    not_sanctioned: Bit = 0
    is_over_18: Bit = 0
    is_over_21: Bit = 0

    @property
    def flags(self) -> PackedFlags:
        """Packed flags as an IntFlag."""
        return PackedFlags(self.packed_flags)

    def published(self) -> tuple[int, int, int]:
        """The (is_valid, nullifier, packed_flags) triple carried by the proof."""
        return self.is_valid, self.nullifier, self.packed_flags

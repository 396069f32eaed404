"""
Public Signal Layout
====================

The fixed 28-slot public signal vector shared by the prover, the proving
backend and the on-ledger verifier:

    0       minAge
    1-10    allowedJurisdictions
    11      requireAccredited
    12      credentialHashPublic (low 60 bits of the credential hash)
    13      recipientAddress
    14      currentDate
    15-24   sanctionedCountries
    25      isValid
    26      nullifier
    27      packedFlags

Version: 0.1.0
"""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from noah.circuit.models import (
    SLOT_COUNT,
    CircuitOutputs,
    FieldElement,
    PackedFlags,
    PublicParams,
    SlotList,
)


SIGNAL_COUNT = 28

MIN_AGE = 0
ALLOWED_JURISDICTIONS = slice(1, 1 + SLOT_COUNT)
REQUIRE_ACCREDITED = 11
CREDENTIAL_HASH = 12
USER_ADDRESS = 13
CURRENT_DATE = 14
SANCTIONED_COUNTRIES = slice(15, 15 + SLOT_COUNT)
IS_VALID = 25
NULLIFIER = 26
PACKED_FLAGS = 27


class PublicSignals(BaseModel):
    """Named view over the 28 public signals of a proof."""

    model_config = ConfigDict(frozen=True)

    min_age: FieldElement
    allowed_jurisdictions: SlotList
    require_accredited: FieldElement
    credential_hash: FieldElement
    user_address: FieldElement
    current_date: FieldElement
    sanctioned_countries: SlotList
    is_valid: FieldElement
    nullifier: FieldElement
    packed_flags: FieldElement

    @classmethod
    def from_list(cls, signals: Sequence[int | str]) -> "PublicSignals":
        """
        Parse a raw signal vector (ints or decimal strings).

        Raises:
            ValueError: If the vector does not have exactly 28 entries
        """
        if len(signals) != SIGNAL_COUNT:
            raise ValueError(f"Expected {SIGNAL_COUNT} public signals, got {len(signals)}")
        values = [int(s) for s in signals]
        return cls(
            min_age=values[MIN_AGE],
            allowed_jurisdictions=values[ALLOWED_JURISDICTIONS],
            require_accredited=values[REQUIRE_ACCREDITED],
            credential_hash=values[CREDENTIAL_HASH],
            user_address=values[USER_ADDRESS],
            current_date=values[CURRENT_DATE],
            sanctioned_countries=values[SANCTIONED_COUNTRIES],
            is_valid=values[IS_VALID],
            nullifier=values[NULLIFIER],
            packed_flags=values[PACKED_FLAGS],
        )

    @classmethod
    def from_circuit(cls, params: PublicParams, outputs: CircuitOutputs) -> "PublicSignals":
        """Assemble the signal vector from circuit inputs and outputs."""
        return cls(
            min_age=params.min_age,
            allowed_jurisdictions=list(params.allowed_jurisdictions),
            require_accredited=params.require_accredited,
            credential_hash=params.credential_hash_public,
            user_address=params.recipient_address,
            current_date=params.current_date,
            sanctioned_countries=list(params.sanctioned_countries),
            is_valid=outputs.is_valid,
            nullifier=outputs.nullifier,
            packed_flags=outputs.packed_flags,
        )

    def to_list(self) -> list[int]:
        """Serialize to the fixed 28-slot integer layout."""
        return [
            self.min_age,
            *self.allowed_jurisdictions,
            self.require_accredited,
            self.credential_hash,
            self.user_address,
            self.current_date,
            *self.sanctioned_countries,
            self.is_valid,
            self.nullifier,
            self.packed_flags,
        ]

    def to_strings(self) -> list[str]:
        """Serialize as decimal strings (proof JSON format)."""
        return [str(value) for value in self.to_list()]

    def public_params(self) -> PublicParams:
        """The public inputs portion of the vector."""
        return PublicParams(
            min_age=self.min_age,
            allowed_jurisdictions=list(self.allowed_jurisdictions),
            require_accredited=self.require_accredited,
            credential_hash_public=self.credential_hash,
            recipient_address=self.user_address,
            current_date=self.current_date,
            sanctioned_countries=list(self.sanctioned_countries),
        )

    def has_flags(self, flags: PackedFlags) -> bool:
        """True if every bit in ``flags`` is set in ``packed_flags``."""
        return self.packed_flags & flags == flags

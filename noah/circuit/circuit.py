"""
KYC Predicate Circuit
=====================

Maps a private identity witness and the public policy inputs to the public
outputs (isValid, nullifier, packedFlags).

Predicates:
    1. Age            actual_age >= min_age (policy threshold), plus the fixed
                      18 / 21 thresholds used only for disclosure packing
    2. Jurisdiction   actual_jurisdiction in allowed_jurisdictions
    3. Sanctions      actual_jurisdiction NOT in sanctioned_countries
    4. Expiry         expiry_date > current_date (strict)
    5. Hash           credential_hash == credential_hash_public
    6. Accreditation  not required, or actual == required

``is_valid`` is the conjunction of all six. ``packed_flags`` is
``over18 + 2*over21 + 4*expiry + 8*not_sanctioned``.

Evaluation is pure: it never raises on a failing predicate, it reports it.

Version: 0.1.0
"""

from noah.circuit import gadgets
from noah.circuit.models import (
    OVER_18_THRESHOLD,
    OVER_21_THRESHOLD,
    CircuitOutputs,
    IdentityWitness,
    PublicParams,
)
from noah.circuit.nullifier import derive_nullifier


CIRCUIT_NAME = "zkkyc"


class KYCCircuit:
    """
    The compliance predicate circuit.

    Usage:
        circuit = KYCCircuit()
        outputs = circuit.evaluate(witness, params)
        assert circuit.is_satisfied(witness, params, outputs)
    """

    name = CIRCUIT_NAME

    def evaluate(self, witness: IdentityWitness, params: PublicParams) -> CircuitOutputs:
        """
        Compute the public outputs for a witness under the given public inputs.

        Args:
            witness: Private identity attributes
            params: Policy and binding values published with the proof

        Returns:
            CircuitOutputs with published values and per-predicate results
        """
        age_valid = gadgets.cmp_gte(witness.actual_age, params.min_age)
        is_over_18 = gadgets.cmp_gte(witness.actual_age, OVER_18_THRESHOLD)
        is_over_21 = gadgets.cmp_gte(witness.actual_age, OVER_21_THRESHOLD)

        jurisdiction_valid = gadgets.membership(
            witness.actual_jurisdiction,
            params.allowed_jurisdictions,
        )
        not_sanctioned = gadgets.not_member(
            witness.actual_jurisdiction,
            params.sanctioned_countries,
        )

        expiry_valid = gadgets.cmp_gt(witness.expiry_date, params.current_date)

        hash_valid = gadgets.is_zero(
            gadgets.sub(witness.credential_hash, params.credential_hash_public)
        )

        accreditation_valid = gadgets.accreditation(
            witness.actual_accredited,
            params.require_accredited,
        )

        packed_flags = gadgets.add(
            gadgets.add(is_over_18, gadgets.mul(is_over_21, 2)),
            gadgets.add(gadgets.mul(expiry_valid, 4), gadgets.mul(not_sanctioned, 8)),
        )

        is_valid = gadgets.and_all(
            age_valid,
            jurisdiction_valid,
            hash_valid,
            accreditation_valid,
            expiry_valid,
            not_sanctioned,
        )

        return CircuitOutputs(
            is_valid=is_valid,
            nullifier=derive_nullifier(witness.passport_number),
            packed_flags=packed_flags,
            age_valid=age_valid,
            jurisdiction_valid=jurisdiction_valid,
            hash_valid=hash_valid,
            accreditation_valid=accreditation_valid,
            expiry_valid=expiry_valid,
            not_sanctioned=not_sanctioned,
            is_over_18=is_over_18,
            is_over_21=is_over_21,
        )

    def is_satisfied(
        self,
        witness: IdentityWitness,
        params: PublicParams,
        claimed: CircuitOutputs | tuple[int, int, int],
    ) -> bool:
        """
        Check a full assignment against the constraint system.

        The assignment is satisfiable only if the claimed public outputs equal
        the ones the constraints force, e.g. claiming ``is_valid=1`` for an
        expired document is unsatisfiable.

        Args:
            witness: Private inputs
            params: Public inputs
            claimed: Claimed outputs, or an (is_valid, nullifier, packed_flags) triple
        """
        if isinstance(claimed, CircuitOutputs):
            claimed = claimed.published()
        return self.evaluate(witness, params).published() == tuple(claimed)

"""
Unit tests for the KYC predicate circuit.
"""

from collections.abc import Callable

import pytest
from pydantic import ValidationError

from noah.circuit import (
    ALL_FLAGS,
    IdentityWitness,
    KYCCircuit,
    PackedFlags,
    PublicParams,
    derive_nullifier,
    pad_slots,
    passport_number_to_field,
)
from noah.circuit import gadgets
from noah.identity import FIELD_ORDER, jurisdiction_code
from tests.conftest import NOW, OTHER_USER_ADDRESS, PASSPORT_NUMBER

Inputs = Callable[..., tuple[IdentityWitness, PublicParams]]


class TestGadgets:
    """Tests for arithmetic gadgets."""

    def test_is_zero(self) -> None:
        """Test zero detection."""
        assert gadgets.is_zero(0) == 1
        assert gadgets.is_zero(5) == 0

    def test_comparisons(self) -> None:
        """Test unsigned comparisons."""
        assert gadgets.cmp_gte(18, 18) == 1
        assert gadgets.cmp_gte(17, 18) == 0
        assert gadgets.cmp_gt(18, 18) == 0
        assert gadgets.cmp_gt(19, 18) == 1

    def test_membership_ignores_sentinel(self) -> None:
        """Test that an empty slot never matches, even for actual value 0."""
        assert gadgets.membership(0, [0] * 10) == 0
        assert gadgets.membership(7, [0, 0, 7] + [0] * 7) == 1
        assert gadgets.membership(8, [0, 0, 7] + [0] * 7) == 0

    def test_not_member(self) -> None:
        """Test sanctions exclusion."""
        assert gadgets.not_member(7, [7] + [0] * 9) == 0
        assert gadgets.not_member(0, [0] * 10) == 1

    def test_accreditation(self) -> None:
        """Test accreditation is only enforced when required."""
        assert gadgets.accreditation(0, 0) == 1
        assert gadgets.accreditation(1, 0) == 1
        assert gadgets.accreditation(1, 1) == 1
        assert gadgets.accreditation(0, 1) == 0

    def test_and_all(self) -> None:
        """Test conjunction."""
        assert gadgets.and_all(1, 1, 1) == 1
        assert gadgets.and_all(1, 0, 1) == 0


class TestKYCCircuit:
    """Tests for KYCCircuit.evaluate."""

    @pytest.fixture
    def circuit(self) -> KYCCircuit:
        return KYCCircuit()

    def test_valid_credential(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that a valid credential sets every flag."""
        outputs = circuit.evaluate(*make_inputs(credential_hash))

        assert outputs.is_valid == 1
        assert outputs.packed_flags == 15
        assert outputs.flags == ALL_FLAGS

    def test_underage(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that age 17 clears both age flags."""
        outputs = circuit.evaluate(*make_inputs(credential_hash, age=17))

        assert outputs.is_valid == 0
        assert outputs.age_valid == 0
        assert outputs.packed_flags == 12

    def test_over_18_not_21(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that age 19 sets only the over-18 flag."""
        outputs = circuit.evaluate(*make_inputs(credential_hash, age=19))

        assert outputs.is_valid == 1
        assert outputs.packed_flags == 13
        assert PackedFlags.OVER_21 not in outputs.flags

    def test_age_thresholds_independent_of_policy(
        self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str
    ) -> None:
        """Test that the 18/21 flags ignore the policy minimum."""
        outputs = circuit.evaluate(*make_inputs(credential_hash, age=16, min_age=0))

        assert outputs.is_valid == 1
        assert outputs.packed_flags == 12

    def test_expired(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that an expired document clears the expiry flag."""
        outputs = circuit.evaluate(*make_inputs(credential_hash, expiry_date=NOW - 1))

        assert outputs.is_valid == 0
        assert outputs.packed_flags == 11

    def test_expiry_boundary_is_strict(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that expiry equal to the current date fails."""
        at_boundary = circuit.evaluate(*make_inputs(credential_hash, expiry_date=NOW))
        one_after = circuit.evaluate(*make_inputs(credential_hash, expiry_date=NOW + 1))

        assert at_boundary.expiry_valid == 0
        assert at_boundary.is_valid == 0
        assert one_after.expiry_valid == 1

    def test_sanctioned(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that a sanctioned nationality clears the sanctions flag."""
        outputs = circuit.evaluate(
            *make_inputs(credential_hash, jurisdiction="KP", allowed=["US", "KP"])
        )

        assert outputs.jurisdiction_valid == 1
        assert outputs.not_sanctioned == 0
        assert outputs.is_valid == 0
        assert outputs.packed_flags == 7

    def test_jurisdiction_not_allowed(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test membership failure."""
        outputs = circuit.evaluate(*make_inputs(credential_hash, jurisdiction="GB"))

        assert outputs.jurisdiction_valid == 0
        assert outputs.is_valid == 0
        assert outputs.packed_flags == 15

    def test_empty_allow_list_rejects(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that an all-sentinel allow list admits nobody."""
        outputs = circuit.evaluate(*make_inputs(credential_hash, allowed=[]))

        assert outputs.jurisdiction_valid == 0
        assert outputs.is_valid == 0

    def test_hash_mismatch(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that the witness hash must equal the public hash."""
        witness, params = make_inputs(credential_hash)
        params = params.model_copy(update={"credential_hash_public": params.credential_hash_public + 1})

        outputs = circuit.evaluate(witness, params)

        assert outputs.hash_valid == 0
        assert outputs.is_valid == 0

    def test_accreditation_required(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test accreditation enforcement."""
        failing = circuit.evaluate(*make_inputs(credential_hash, accredited=0, require_accredited=1))
        passing = circuit.evaluate(*make_inputs(credential_hash, accredited=1, require_accredited=1))

        assert failing.accreditation_valid == 0
        assert failing.is_valid == 0
        assert passing.is_valid == 1

    def test_nullifier_is_global(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that the nullifier depends on the passport only."""
        first = circuit.evaluate(*make_inputs(credential_hash))
        other_wallet = circuit.evaluate(
            *make_inputs(credential_hash, user=OTHER_USER_ADDRESS, min_age=21, allowed=["CA"], jurisdiction="CA")
        )
        other_passport = circuit.evaluate(*make_inputs(credential_hash, passport_number="X1234567"))

        assert first.nullifier == other_wallet.nullifier
        assert first.nullifier == derive_nullifier(passport_number_to_field(PASSPORT_NUMBER))
        assert first.nullifier != other_passport.nullifier

    def test_evaluation_is_deterministic(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that repeated evaluation yields identical outputs."""
        inputs = make_inputs(credential_hash)

        assert circuit.evaluate(*inputs) == circuit.evaluate(*inputs)

    def test_is_satisfied(self, circuit: KYCCircuit, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that only the forced outputs satisfy the constraints."""
        witness, params = make_inputs(credential_hash, expiry_date=NOW)
        outputs = circuit.evaluate(witness, params)

        assert circuit.is_satisfied(witness, params, outputs)
        assert not circuit.is_satisfied(witness, params, (1, outputs.nullifier, 15))


class TestCircuitInputValidation:
    """Tests for malformed circuit inputs."""

    def test_wrong_slot_count(self, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that lists must have exactly ten slots."""
        _, params = make_inputs(credential_hash)

        with pytest.raises(ValidationError):
            PublicParams(**{**params.model_dump(), "allowed_jurisdictions": [1, 2, 3]})

    def test_value_outside_field(self, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that values must be field elements."""
        witness, _ = make_inputs(credential_hash)

        with pytest.raises(ValidationError):
            IdentityWitness(**{**witness.model_dump(), "expiry_date": FIELD_ORDER})

    def test_negative_value(self, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that values must be non-negative."""
        witness, _ = make_inputs(credential_hash)

        with pytest.raises(ValidationError):
            IdentityWitness(**{**witness.model_dump(), "actual_age": -1})

    def test_accredited_must_be_bit(self, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that accreditation is 0 or 1."""
        witness, _ = make_inputs(credential_hash)

        with pytest.raises(ValidationError):
            IdentityWitness(**{**witness.model_dump(), "actual_accredited": 2})

    def test_pad_slots(self) -> None:
        """Test sentinel padding."""
        code = jurisdiction_code("US")

        assert pad_slots([code]) == [code] + [0] * 9
        with pytest.raises(ValueError):
            pad_slots(list(range(1, 12)))

    def test_witness_repr_hides_values(self, make_inputs: Inputs, credential_hash: str) -> None:
        """Test that the witness does not leak through repr."""
        witness, _ = make_inputs(credential_hash)

        assert str(witness.actual_age) not in repr(witness)

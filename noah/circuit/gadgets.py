"""
Constraint Gadgets
==================

Field-arithmetic building blocks of the KYC circuit. Each gadget returns a
0/1 field value and is built only from the operations a constraint system
offers (add, sub, mul, is-zero, unsigned compare), so the circuit can be
mirrored one-to-one by a proving backend.
"""

from collections.abc import Sequence

from noah.identity.hashing import FIELD_ORDER


def add(a: int, b: int) -> int:
    return (a + b) % FIELD_ORDER


def sub(a: int, b: int) -> int:
    return (a - b) % FIELD_ORDER


def mul(a: int, b: int) -> int:
    return (a * b) % FIELD_ORDER


def is_zero(a: int) -> int:
    """1 if ``a`` is zero in the field, else 0."""
    return 1 if a % FIELD_ORDER == 0 else 0


def cmp_gte(a: int, b: int) -> int:
    """Unsigned ``a >= b`` over canonical field representatives."""
    return 1 if a % FIELD_ORDER >= b % FIELD_ORDER else 0


def cmp_gt(a: int, b: int) -> int:
    """Unsigned ``a > b`` over canonical field representatives."""
    return 1 if a % FIELD_ORDER > b % FIELD_ORDER else 0


def membership(actual: int, slots: Sequence[int]) -> int:
    """
    1 if ``actual`` equals a non-empty slot.

    Per slot: ``match_i = (slot_i != 0) * is_zero(actual - slot_i)``; the
    matches are summed and the sum compared against zero. An empty slot never
    matches, including when ``actual`` is itself 0.
    """
    total = 0
    for slot in slots:
        non_empty = cmp_gt(slot, 0)
        matches = is_zero(sub(actual, slot))
        total = add(total, mul(non_empty, matches))
    return cmp_gt(total, 0)


def not_member(actual: int, slots: Sequence[int]) -> int:
    """1 if ``actual`` is absent from the non-empty slots."""
    return sub(1, membership(actual, slots))


def accreditation(actual: int, required: int) -> int:
    """
    Accreditation predicate.

    ``not_required + (1 - not_required) * is_zero(actual - required)``:
    always 1 when nothing is required, otherwise ``actual`` must equal
    ``required``.
    """
    not_required = is_zero(required)
    matches = is_zero(sub(actual, required))
    return add(not_required, mul(sub(1, not_required), matches))


def and_all(*bits: int) -> int:
    """Product of 0/1 values."""
    result = 1
    for bit in bits:
        result = mul(result, bit)
    return result

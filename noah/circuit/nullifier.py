"""
Identity Nullifier
==================

The nullifier is a one-way function of the passport number alone. It does not
depend on the wallet or on the relying party, so one physical document always
yields the same nullifier everywhere, which is what lets the registry bind it
to a single wallet.
"""

from noah.identity.hashing import FIELD_ORDER, keccak256, to_field


NULLIFIER_DOMAIN = b"noah.identity.nullifier.v1"
PASSPORT_DOMAIN = b"noah.identity.passport.v1"


def derive_nullifier(passport_number: int) -> int:
    """
    Derive the global nullifier for a passport number field element.

    ``keccak256(NULLIFIER_DOMAIN || passport_number as 32-byte big-endian)``
    reduced into the BN254 scalar field.
    """
    if passport_number < 0 or passport_number >= FIELD_ORDER:
        raise ValueError("passport_number must be a field element")
    return to_field(keccak256(NULLIFIER_DOMAIN + passport_number.to_bytes(32, "big")))


def passport_number_to_field(document_number: str) -> int:
    """
    Map a printed document number (e.g. "L898902C3") to a field element.

    Filler characters and surrounding whitespace are ignored and letters are
    upper-cased so OCR variants of the same number agree.
    """
    normalized = document_number.replace("<", "").strip().upper()
    if not normalized:
        raise ValueError("Document number must be non-empty")
    return to_field(keccak256(PASSPORT_DOMAIN + normalized.encode("utf-8")))

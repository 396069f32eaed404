"""
Identity Utilities
==================

Jurisdiction codes, credential hashes and wallet address encodings.

Usage:
    from noah.identity import generate_credential_hash, jurisdiction_code

    result = generate_credential_hash(
        user_address="0x1234...",
        age=25,
        jurisdiction="US",
        accredited=True,
    )
    code = jurisdiction_code("US")
"""

from noah.identity.credentials import (
    CREDENTIAL_HASH_BITS,
    CredentialHashResult,
    address_to_int,
    credential_hash_to_int,
    generate_credential_hash,
    is_valid_address,
    is_valid_credential_hash,
    normalize_address,
    normalize_credential_hash,
    to_checksum_address,
    truncate_credential_hash,
)
from noah.identity.hashing import FIELD_ORDER, keccak256
from noah.identity.jurisdiction import (
    jurisdiction_code,
    jurisdiction_codes,
    parse_jurisdictions,
)


__all__ = [
    "FIELD_ORDER",
    "CREDENTIAL_HASH_BITS",
    "keccak256",
    # Jurisdictions
    "jurisdiction_code",
    "jurisdiction_codes",
    "parse_jurisdictions",
    # Credentials
    "CredentialHashResult",
    "generate_credential_hash",
    "is_valid_credential_hash",
    "normalize_credential_hash",
    "credential_hash_to_int",
    "truncate_credential_hash",
    # Addresses
    "is_valid_address",
    "normalize_address",
    "to_checksum_address",
    "address_to_int",
]

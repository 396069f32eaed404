"""
Credential Hashing and Address Helpers
======================================

Issuer-side credential hash generation and the numeric encodings the
verifier uses to bind proofs to wallets and credentials.

Version: 0.1.0
"""

import re
import time

from pydantic import BaseModel, Field

from noah.identity.hashing import keccak256, to_hex
from noah.identity.jurisdiction import jurisdiction_code


# Width of the credential hash exposed as a public signal
CREDENTIAL_HASH_BITS = 60
CREDENTIAL_HASH_MASK = (1 << CREDENTIAL_HASH_BITS) - 1

_CREDENTIAL_HASH_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class CredentialHashResult(BaseModel):
    """Result of credential hash generation."""

    credential_hash: str = Field(..., description="0x-prefixed keccak256 digest (bytes32)")
    jurisdiction_hash: str = Field(..., description="0x-prefixed jurisdiction code")
    credential_data: str = Field(..., description="Preimage that was hashed")
    timestamp: int = Field(..., description="Issuance timestamp in milliseconds")


def generate_credential_hash(
    user_address: str,
    age: int,
    jurisdiction: str,
    accredited: bool,
    timestamp: int | None = None,
) -> CredentialHashResult:
    """
    Generate a credential hash from the attested user data.

    The preimage is
    ``user:{address},age:{age},jurisdiction:{code},accredited:{0|1},timestamp:{ms}``.

    Args:
        user_address: Holder's wallet address
        age: Attested age in years
        jurisdiction: Jurisdiction identifier, e.g. "US"
        accredited: Accredited investor status
        timestamp: Issuance time in milliseconds (defaults to now)

    Returns:
        CredentialHashResult with the bytes32 credential hash

    Raises:
        ValueError: If any field is malformed
    """
    if not is_valid_address(user_address):
        raise ValueError("user_address must be a valid wallet address")
    if isinstance(age, bool) or not isinstance(age, int) or age < 0:
        raise ValueError("age must be a non-negative integer")
    if not isinstance(accredited, bool):
        raise ValueError("accredited must be a boolean")

    jurisdiction_hash = hex(jurisdiction_code(jurisdiction))
    if timestamp is None:
        timestamp = int(time.time() * 1000)

    credential_data = (
        f"user:{user_address},age:{age},jurisdiction:{jurisdiction_hash},"
        f"accredited:{1 if accredited else 0},timestamp:{timestamp}"
    )

    return CredentialHashResult(
        credential_hash=to_hex(keccak256(credential_data)),
        jurisdiction_hash=jurisdiction_hash,
        credential_data=credential_data,
        timestamp=timestamp,
    )


def is_valid_credential_hash(value: str) -> bool:
    """True for a 0x-prefixed 32-byte hex string."""
    return isinstance(value, str) and bool(_CREDENTIAL_HASH_RE.match(value))


def normalize_credential_hash(value: str) -> str:
    """Lower-case a credential hash after validating its shape."""
    if not is_valid_credential_hash(value):
        raise ValueError(f"Invalid credential hash: {value!r}")
    return value.lower()


def credential_hash_to_int(value: str) -> int:
    """Numeric (uint256) value of a credential hash."""
    return int(normalize_credential_hash(value), 16)


def truncate_credential_hash(value: str | int) -> int:
    """
    Low 60 bits of a credential hash.

    This is the representation carried by the ``credentialHashPublic`` signal
    and the private ``credentialHash`` witness.
    """
    if isinstance(value, str):
        value = credential_hash_to_int(value)
    return value & CREDENTIAL_HASH_MASK


def is_valid_address(address: str) -> bool:
    """
    Validate a wallet address.

    All-lower and all-upper hex are accepted as-is; mixed case must carry a
    valid EIP-55 checksum.
    """
    if not isinstance(address, str) or not _ADDRESS_RE.match(address):
        return False
    body = address[2:]
    if body == body.lower() or body == body.upper():
        return True
    return to_checksum_address(address) == address


def to_checksum_address(address: str) -> str:
    """Return the EIP-55 checksummed form of an address."""
    if not isinstance(address, str) or not _ADDRESS_RE.match(address):
        raise ValueError(f"Invalid wallet address: {address!r}")
    body = address[2:].lower()
    digest = keccak256(body).hex()
    return "0x" + "".join(
        char.upper() if char.isalpha() and int(digest[i], 16) >= 8 else char
        for i, char in enumerate(body)
    )


def normalize_address(address: str) -> str:
    """Lower-case an address after validation; used as the ledger key."""
    if not is_valid_address(address):
        raise ValueError(f"Invalid wallet address: {address!r}")
    return address.lower()


def address_to_int(address: str) -> int:
    """Numeric (uint160) value of a wallet address."""
    return int(normalize_address(address), 16)

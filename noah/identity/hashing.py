"""
Hashing Helpers
===============

Keccak-256 and BN254 scalar field helpers shared by the identity utilities
and the circuit.

Keccak-256 here is the original Keccak padding used by Ethereum, not the
NIST SHA3-256 variant exposed by ``hashlib``.
"""

from Crypto.Hash import keccak


# BN254 scalar field order
FIELD_ORDER = 21888242871839275222246405745257275088548364400416034343698204186575808495617


def keccak256(data: bytes | str) -> bytes:
    """Keccak-256 digest of ``data`` (strings are UTF-8 encoded)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    digest = keccak.new(digest_bits=256)
    digest.update(data)
    return digest.digest()


def to_field(digest: bytes) -> int:
    """Interpret a big-endian digest as an integer and reduce it into the field."""
    return int.from_bytes(digest, "big") % FIELD_ORDER


def to_hex(data: bytes, prefix: str = "0x") -> str:
    """Lower-case hex with prefix."""
    return prefix + data.hex()


def from_hex(value: str) -> bytes:
    """Parse hex with or without ``0x`` prefix."""
    value = value.strip().lower()
    if value.startswith("0x"):
        value = value[2:]
    if len(value) % 2:
        value = "0" + value
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e

"""
Jurisdiction Codes
==================

Maps human jurisdiction identifiers ("US", "ca", "GB") to the numeric codes
used in policy allow-lists, sanctioned lists and the prover witness.

A code is ``keccak256(normalized) mod FIELD_ORDER``. Zero is the empty-slot
sentinel of every fixed-size list and is therefore not a representable code.
"""

from noah.identity.hashing import FIELD_ORDER, keccak256, to_field


def normalize_jurisdiction(jurisdiction: str) -> str:
    """Trim and upper-case a jurisdiction identifier."""
    if not isinstance(jurisdiction, str) or not jurisdiction.strip():
        raise ValueError("Jurisdiction must be a non-empty string")
    return jurisdiction.strip().upper()


def jurisdiction_code(jurisdiction: str) -> int:
    """
    Convert a jurisdiction string to its numeric code.

    Args:
        jurisdiction: Jurisdiction identifier, e.g. "US"

    Returns:
        Field element in [1, FIELD_ORDER)

    Raises:
        ValueError: If the identifier is empty or hashes to the sentinel
    """
    code = to_field(keccak256(normalize_jurisdiction(jurisdiction)))
    if code == 0:
        raise ValueError(f"Jurisdiction {jurisdiction!r} maps to the empty-slot sentinel")
    return code


def jurisdiction_codes(jurisdictions: list[str | int]) -> list[int]:
    """
    Convert a mixed list of identifiers and numeric codes.

    Numeric entries (ints or digit strings) pass through unchanged so callers
    can mix pre-hashed codes with plain identifiers. Blank strings are dropped.
    """
    codes: list[int] = []
    for item in jurisdictions:
        if isinstance(item, bool):
            raise ValueError("Jurisdiction must be a string or integer code")
        if isinstance(item, int):
            codes.append(_check_code(item))
            continue
        token = item.strip()
        if not token:
            continue
        if token.isdigit():
            codes.append(_check_code(int(token)))
        else:
            codes.append(jurisdiction_code(token))
    return codes


def parse_jurisdictions(value: str) -> list[int]:
    """Parse a comma separated jurisdiction string into codes."""
    if not value:
        return []
    return jurisdiction_codes(value.split(","))


def _check_code(code: int) -> int:
    if code <= 0 or code >= FIELD_ORDER:
        raise ValueError(f"Jurisdiction code {code} outside (0, FIELD_ORDER)")
    return code

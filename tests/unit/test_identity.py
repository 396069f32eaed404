"""
Unit tests for identity helpers.
"""

import pytest

from noah.identity import (
    CREDENTIAL_HASH_BITS,
    FIELD_ORDER,
    address_to_int,
    credential_hash_to_int,
    generate_credential_hash,
    is_valid_address,
    is_valid_credential_hash,
    jurisdiction_code,
    jurisdiction_codes,
    keccak256,
    normalize_address,
    normalize_credential_hash,
    parse_jurisdictions,
    to_checksum_address,
    truncate_credential_hash,
)
from tests.conftest import USER_ADDRESS


class TestKeccak:
    """Tests for keccak256."""

    def test_empty_digest(self) -> None:
        """Test the Ethereum Keccak-256 of the empty string."""
        assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"

    def test_str_is_utf8(self) -> None:
        """Test that strings hash as UTF-8."""
        assert keccak256("US") == keccak256(b"US")


class TestJurisdictions:
    """Tests for jurisdiction codes."""

    def test_code_is_field_element(self) -> None:
        """Test codes fall in (0, FIELD_ORDER)."""
        code = jurisdiction_code("US")

        assert 0 < code < FIELD_ORDER

    def test_normalization(self) -> None:
        """Test that case and whitespace do not matter."""
        assert jurisdiction_code(" us ") == jurisdiction_code("US")
        assert jurisdiction_code("US") != jurisdiction_code("CA")

    def test_empty_rejected(self) -> None:
        """Test empty identifiers are rejected."""
        with pytest.raises(ValueError):
            jurisdiction_code("  ")

    def test_mixed_codes(self) -> None:
        """Test that numeric codes pass through."""
        assert jurisdiction_codes(["US", 840, "124"]) == [jurisdiction_code("US"), 840, 124]

    def test_zero_code_rejected(self) -> None:
        """Test that the sentinel is not a valid code."""
        with pytest.raises(ValueError):
            jurisdiction_codes([0])

    def test_bool_rejected(self) -> None:
        """Test that booleans are not codes."""
        with pytest.raises(ValueError):
            jurisdiction_codes([True])

    def test_parse_csv(self) -> None:
        """Test parsing a comma separated list."""
        assert parse_jurisdictions("US, ca,,123") == [jurisdiction_code("US"), jurisdiction_code("CA"), 123]
        assert parse_jurisdictions("") == []


class TestCredentialHash:
    """Tests for credential hash generation and parsing."""

    def test_generate(self) -> None:
        """Test hash generation is deterministic for a fixed timestamp."""
        first = generate_credential_hash(USER_ADDRESS, 25, "US", True, timestamp=1_700_000_000_000)
        second = generate_credential_hash(USER_ADDRESS, 25, "US", True, timestamp=1_700_000_000_000)

        assert first.credential_hash == second.credential_hash
        assert is_valid_credential_hash(first.credential_hash)
        assert first.credential_data.startswith(f"user:{USER_ADDRESS},age:25,jurisdiction:0x")
        assert first.credential_data.endswith(",accredited:1,timestamp:1700000000000")
        assert first.jurisdiction_hash == hex(jurisdiction_code("US"))

    def test_attributes_change_hash(self) -> None:
        """Test that every attribute feeds the hash."""
        base = generate_credential_hash(USER_ADDRESS, 25, "US", True, timestamp=1).credential_hash

        assert generate_credential_hash(USER_ADDRESS, 26, "US", True, timestamp=1).credential_hash != base
        assert generate_credential_hash(USER_ADDRESS, 25, "CA", True, timestamp=1).credential_hash != base
        assert generate_credential_hash(USER_ADDRESS, 25, "US", False, timestamp=1).credential_hash != base
        assert generate_credential_hash(USER_ADDRESS, 25, "US", True, timestamp=2).credential_hash != base

    def test_generate_validation(self) -> None:
        """Test input validation."""
        with pytest.raises(ValueError):
            generate_credential_hash("0x123", 25, "US", True)
        with pytest.raises(ValueError):
            generate_credential_hash(USER_ADDRESS, -1, "US", True)
        with pytest.raises(ValueError):
            generate_credential_hash(USER_ADDRESS, 25, "US", 1)  # type: ignore[arg-type]

    def test_format_validation(self) -> None:
        """Test bytes32 format checks."""
        assert is_valid_credential_hash("0x" + "AB" * 32)
        assert not is_valid_credential_hash("ab" * 32)
        assert not is_valid_credential_hash("0x" + "ab" * 31)
        assert normalize_credential_hash("0x" + "AB" * 32) == "0x" + "ab" * 32
        with pytest.raises(ValueError):
            normalize_credential_hash("0xzz")

    def test_truncation_keeps_low_bits(self) -> None:
        """Test the 60-bit truncation."""
        value = "0x" + "f" * 48 + "0123456789abcdef"

        assert CREDENTIAL_HASH_BITS == 60
        assert truncate_credential_hash(value) == 0x123456789ABCDEF
        assert truncate_credential_hash(credential_hash_to_int(value)) == 0x123456789ABCDEF
        assert truncate_credential_hash("0x" + "f" * 64) == (1 << 60) - 1


class TestAddresses:
    """Tests for wallet address helpers."""

    def test_checksum(self) -> None:
        """Test EIP-55 checksumming."""
        checksummed = to_checksum_address("0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")

        assert checksummed == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        assert is_valid_address(checksummed)

    def test_bad_checksum_rejected(self) -> None:
        """Test that a wrong mixed-case checksum is rejected."""
        assert not is_valid_address("0x5AAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")

    def test_normalize(self) -> None:
        """Test lower-casing and rejection."""
        assert normalize_address("0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed") == (
            "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"
        )
        with pytest.raises(ValueError):
            normalize_address("not-an-address")

    def test_address_to_int(self) -> None:
        """Test numeric wallet binding."""
        assert address_to_int(USER_ADDRESS) == int(USER_ADDRESS, 16)
        assert address_to_int(USER_ADDRESS.upper().replace("0X", "0x")) == int(USER_ADDRESS, 16)

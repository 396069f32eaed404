"""
Test Configuration
==================

Pytest fixtures for NOAH tests.
"""

import os
from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["LEDGER_MODE"] = "mock"
os.environ["CIRCUIT_BACKEND"] = "mock"
os.environ["CIRCUIT_SANCTIONED_COUNTRIES"] = "KP,IR"

from noah.circuit import IdentityWitness, PublicParams, pad_slots, passport_number_to_field  # noqa: E402
from noah.identity import (  # noqa: E402
    address_to_int,
    generate_credential_hash,
    jurisdiction_codes,
    truncate_credential_hash,
)
from noah.ledger import Ledger, StaticIssuerDirectory, reset_ledger, set_ledger  # noqa: E402
from noah.zk import MockProofBackend, ProofBundle, reset_proof_backend, set_proof_backend  # noqa: E402


ADMIN_ADDRESS = "0x0000000000000000000000000000000000000a11"
ISSUER_ADDRESS = "0x1111111111111111111111111111111111111111"
PROTOCOL_ADDRESS = "0x2222222222222222222222222222222222222222"
OTHER_PROTOCOL_ADDRESS = "0x4444444444444444444444444444444444444444"
USER_ADDRESS = "0x742d35cc6634c0532925a3b844bc454e4438f44e"
OTHER_USER_ADDRESS = "0x3333333333333333333333333333333333333333"

# 2023-11-14T22:13:20Z
NOW = 1_700_000_000
ONE_YEAR = 365 * 24 * 60 * 60
PASSPORT_NUMBER = "L898902C3"
SANCTIONED = ["KP", "IR"]


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def credential_hash() -> str:
    """Credential hash issued to USER_ADDRESS."""
    return generate_credential_hash(
        user_address=USER_ADDRESS,
        age=25,
        jurisdiction="US",
        accredited=True,
        timestamp=NOW * 1000,
    ).credential_hash


@pytest.fixture
def other_credential_hash() -> str:
    """Credential hash issued to OTHER_USER_ADDRESS."""
    return generate_credential_hash(
        user_address=OTHER_USER_ADDRESS,
        age=30,
        jurisdiction="CA",
        accredited=False,
        timestamp=NOW * 1000,
    ).credential_hash


@pytest.fixture
def backend() -> MockProofBackend:
    """Fresh mock proof backend."""
    return MockProofBackend()


@pytest.fixture
def ledger(backend: MockProofBackend) -> Ledger:
    """Fresh ledger with a fixed clock and one trusted issuer."""
    return Ledger(
        admin=ADMIN_ADDRESS,
        issuers=StaticIssuerDirectory([ISSUER_ADDRESS]),
        backend=backend,
        freshness_window_seconds=3600,
        clock=lambda: NOW,
    )


@pytest.fixture
def make_inputs() -> Callable[..., tuple[IdentityWitness, PublicParams]]:
    """Factory for circuit inputs from plain attributes."""

    def _make(
        credential_hash: str,
        *,
        age: int = 25,
        jurisdiction: str = "US",
        accredited: int = 1,
        passport_number: str = PASSPORT_NUMBER,
        expiry_date: int = NOW + ONE_YEAR,
        min_age: int = 18,
        allowed: list[str | int] | None = None,
        require_accredited: int = 0,
        user: str = USER_ADDRESS,
        current_date: int = NOW,
        sanctioned: list[str] | None = None,
    ) -> tuple[IdentityWitness, PublicParams]:
        truncated = truncate_credential_hash(credential_hash)
        witness = IdentityWitness(
            actual_age=age,
            actual_jurisdiction=jurisdiction_codes([jurisdiction])[0],
            actual_accredited=accredited,
            credential_hash=truncated,
            passport_number=passport_number_to_field(passport_number),
            expiry_date=expiry_date,
        )
        params = PublicParams(
            min_age=min_age,
            allowed_jurisdictions=pad_slots(jurisdiction_codes(allowed if allowed is not None else ["US", "CA"])),
            require_accredited=require_accredited,
            credential_hash_public=truncated,
            recipient_address=address_to_int(user),
            current_date=current_date,
            sanctioned_countries=pad_slots(jurisdiction_codes(sanctioned if sanctioned is not None else SANCTIONED)),
        )
        return witness, params

    return _make


@pytest.fixture
def make_proof(
    backend: MockProofBackend,
    make_inputs: Callable[..., tuple[IdentityWitness, PublicParams]],
) -> Callable[..., ProofBundle]:
    """Factory for proofs from plain attributes."""

    def _prove(credential_hash: str, **kwargs: Any) -> ProofBundle:
        witness, params = make_inputs(credential_hash, **kwargs)
        return backend.prove(witness, params)

    return _prove


@pytest.fixture
def service_ledger(ledger: Ledger, backend: MockProofBackend) -> Generator[Ledger, None, None]:
    """Install the test ledger and backend as the process singletons."""
    set_ledger(ledger)
    set_proof_backend(backend)
    yield ledger
    reset_ledger()
    reset_proof_backend()


@pytest_asyncio.fixture
async def access_control_client(service_ledger: Ledger) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Access Control Service."""
    from services.access_control.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


def auth_headers_for(address: str) -> dict[str, str]:
    """Bearer headers for a wallet."""
    from noah.auth import create_wallet_token

    token = create_wallet_token(address)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def issuer_headers() -> dict[str, str]:
    """Authentication headers for the trusted issuer."""
    return auth_headers_for(ISSUER_ADDRESS)


@pytest.fixture
def protocol_headers() -> dict[str, str]:
    """Authentication headers for the relying party."""
    return auth_headers_for(PROTOCOL_ADDRESS)

"""
Access Control Service Dependencies
===================================

FastAPI dependencies shared by the route modules.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from noah.auth import Caller, get_current_caller
from noah.identity.credentials import normalize_address, normalize_credential_hash
from noah.ledger import Ledger, get_ledger
from noah.zk import ProofBackend, get_proof_backend


def ledger_dependency() -> Ledger:
    """Provide the process ledger."""
    return get_ledger()


def backend_dependency() -> ProofBackend:
    """Provide the configured proof backend."""
    return get_proof_backend()


def address_param(value: str, name: str = "address") -> str:
    """Normalize a path address or fail with 400."""
    try:
        return normalize_address(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {name}: {value}",
        ) from e


def credential_hash_param(value: str) -> str:
    """Normalize a path credential hash or fail with 400."""
    try:
        return normalize_credential_hash(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid credential hash: {value}",
        ) from e


LedgerDep = Annotated[Ledger, Depends(ledger_dependency)]
BackendDep = Annotated[ProofBackend, Depends(backend_dependency)]
CallerDep = Annotated[Caller, Depends(get_current_caller)]

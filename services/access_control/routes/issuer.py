"""
Issuer Routes
=============

Credential registration, revocation and status for trusted issuers.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field, field_validator

from noah.identity.credentials import normalize_address, normalize_credential_hash
from noah.ledger import CredentialStatusView
from services.access_control.dependencies import CallerDep, LedgerDep, credential_hash_param


router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class RegisterCredentialRequest(BaseModel):
    """Request to register a credential hash."""

    credential_hash: str = Field(..., description="0x-prefixed bytes32 credential hash")
    user: str = Field(..., description="Wallet the credential was issued to")

    @field_validator("credential_hash")
    @classmethod
    def validate_credential_hash(cls, v: str) -> str:
        return normalize_credential_hash(v)

    @field_validator("user")
    @classmethod
    def validate_user(cls, v: str) -> str:
        return normalize_address(v)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "credential_hash": "0x" + "ab" * 32,
                    "user": "0x742d35cc6634c0532925a3b844bc454e4438f44e",
                }
            ]
        }
    }


class RevokeCredentialRequest(BaseModel):
    """Request to revoke a credential hash."""

    credential_hash: str = Field(..., description="0x-prefixed bytes32 credential hash")

    @field_validator("credential_hash")
    @classmethod
    def validate_credential_hash(cls, v: str) -> str:
        return normalize_credential_hash(v)


class TransactionResponse(BaseModel):
    """Result of a state-changing ledger call."""

    success: bool = True
    transaction_hash: str
    block_number: int


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/credential/register", response_model=TransactionResponse)
async def register_credential(
    request: RegisterCredentialRequest,
    caller: CallerDep,
    ledger: LedgerDep,
) -> TransactionResponse:
    """Register a credential hash issued off-chain to ``user``."""
    ledger.registry.register_credential(caller.address, request.credential_hash, request.user)
    event = ledger.events(limit=1)[-1]

    return TransactionResponse(transaction_hash=event.tx_hash, block_number=event.block_number)


@router.post("/credential/revoke", response_model=TransactionResponse)
async def revoke_credential(
    request: RevokeCredentialRequest,
    caller: CallerDep,
    ledger: LedgerDep,
) -> TransactionResponse:
    """Revoke a credential. Only its issuer or the admin may do this."""
    ledger.registry.revoke_credential(caller.address, request.credential_hash)
    event = ledger.events(limit=1)[-1]

    return TransactionResponse(transaction_hash=event.tx_hash, block_number=event.block_number)


@router.get("/credential/check/{credential_hash}", response_model=CredentialStatusView)
async def check_credential(credential_hash: str, ledger: LedgerDep) -> CredentialStatusView:
    """Status of a credential hash."""
    return ledger.registry.credential_status(credential_hash_param(credential_hash))

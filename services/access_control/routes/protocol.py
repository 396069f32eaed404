"""
Protocol Routes
===============

Relying-party policy management, proof verification and access control.
The calling protocol is the wallet in the bearer token.
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from noah.identity.credentials import normalize_address, normalize_credential_hash
from noah.ledger import Requirements
from noah.logging import get_logger
from noah.zk import Groth16Proof
from services.access_control.dependencies import CallerDep, LedgerDep, address_param


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class SetRequirementsRequest(BaseModel):
    """Request to create or overwrite the caller's policy."""

    min_age: int = Field(..., ge=0, description="Minimum age; 0 disables the threshold")
    allowed_jurisdictions: list[str | int] = Field(
        default_factory=list,
        description="Up to 10 jurisdiction identifiers or numeric codes, in order",
    )
    require_accredited: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [{"min_age": 18, "allowed_jurisdictions": ["US", "CA", "GB"], "require_accredited": False}]
        }
    }


class RequirementsResponse(BaseModel):
    """A protocol's policy. Jurisdiction codes are decimal strings."""

    protocol_address: str
    min_age: int
    allowed_jurisdictions: list[str]
    require_accredited: bool
    is_set: bool

    @classmethod
    def from_requirements(cls, protocol: str, requirements: Requirements) -> "RequirementsResponse":
        return cls(
            protocol_address=protocol,
            min_age=requirements.min_age,
            allowed_jurisdictions=[str(code) for code in requirements.allowed_jurisdictions],
            require_accredited=requirements.require_accredited,
            is_set=requirements.is_set,
        )


class VerifyRequest(BaseModel):
    """Proof submission for a user."""

    proof: Groth16Proof
    public_signals: list[str | int] = Field(..., description="The 28 public signals")
    credential_hash: str = Field(..., description="Full 0x-prefixed credential hash")
    user: str = Field(..., description="Wallet the proof is bound to")

    @field_validator("credential_hash")
    @classmethod
    def validate_credential_hash(cls, v: str) -> str:
        return normalize_credential_hash(v)

    @field_validator("user")
    @classmethod
    def validate_user(cls, v: str) -> str:
        return normalize_address(v)


class AccessStatusResponse(BaseModel):
    """Access state for a (protocol, user) pair."""

    has_access: bool
    protocol_address: str
    user_address: str
    credential_hash: str | None = None


class AccessChangeResponse(AccessStatusResponse):
    """Access state after a grant or revocation."""

    success: bool = True
    transaction_hash: str
    block_number: int


# ============================================================================
# Endpoints
# ============================================================================


@router.put("/requirements", response_model=RequirementsResponse)
async def set_requirements(
    request: SetRequirementsRequest,
    caller: CallerDep,
    ledger: LedgerDep,
) -> RequirementsResponse:
    """Create or overwrite the calling protocol's policy."""
    requirements = ledger.verifier.set_requirements(
        caller.address,
        request.min_age,
        request.allowed_jurisdictions,
        request.require_accredited,
    )
    return RequirementsResponse.from_requirements(caller.address, requirements)


@router.get("/{address}/requirements", response_model=RequirementsResponse)
async def get_requirements(address: str, ledger: LedgerDep) -> RequirementsResponse:
    """A protocol's current policy."""
    protocol = address_param(address, "protocol address")
    return RequirementsResponse.from_requirements(protocol, ledger.verifier.get_requirements(protocol))


@router.post("/verify", response_model=AccessChangeResponse)
async def verify_and_grant_access(
    request: VerifyRequest,
    caller: CallerDep,
    ledger: LedgerDep,
) -> AccessChangeResponse:
    """
    Verify a user's proof against the calling protocol's policy and grant
    access on success.
    """
    logger.info("verification_requested", protocol=caller.address, user=request.user)

    try:
        grant = ledger.verifier.verify_and_grant_access(
            caller.address,
            request.proof,
            request.public_signals,
            request.credential_hash,
            request.user,
        )
    except ValueError as e:
        logger.warning("verification_input_invalid", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    event = ledger.events(limit=1)[-1]
    return AccessChangeResponse(
        has_access=grant.granted,
        protocol_address=caller.address,
        user_address=request.user,
        credential_hash=grant.credential_hash,
        transaction_hash=event.tx_hash,
        block_number=event.block_number,
    )


@router.get("/access/{user}", response_model=AccessStatusResponse)
async def check_access(user: str, caller: CallerDep, ledger: LedgerDep) -> AccessStatusResponse:
    """Whether ``user`` holds access at the calling protocol."""
    user_address = address_param(user, "user address")
    grant = ledger.verifier.access_grant(caller.address, user_address)

    return AccessStatusResponse(
        has_access=ledger.verifier.check_access(caller.address, user_address),
        protocol_address=caller.address,
        user_address=user_address,
        credential_hash=grant.credential_hash,
    )


@router.delete("/access/{user}", response_model=AccessChangeResponse)
async def revoke_access(user: str, caller: CallerDep, ledger: LedgerDep) -> AccessChangeResponse:
    """Clear ``user``'s access at the calling protocol."""
    user_address = address_param(user, "user address")
    grant = ledger.verifier.revoke_access(caller.address, user_address)
    event = ledger.events(limit=1)[-1]

    return AccessChangeResponse(
        has_access=grant.granted,
        protocol_address=caller.address,
        user_address=user_address,
        credential_hash=grant.credential_hash,
        transaction_hash=event.tx_hash,
        block_number=event.block_number,
    )

"""
Proof Generation Routes
=======================

Assembles the circuit witness from plain credential attributes and a policy,
then proves it with the configured backend.
"""

import asyncio
import time
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from noah.circuit import IdentityWitness, PublicParams, pad_slots, passport_number_to_field
from noah.config import settings
from noah.identity import (
    address_to_int,
    jurisdiction_codes,
    normalize_address,
    normalize_credential_hash,
    truncate_credential_hash,
)
from noah.logging import get_logger
from noah.zk import ProofGenerationError
from services.access_control.dependencies import BackendDep


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class CredentialInput(BaseModel):
    """Private credential attributes held by the user."""

    age: int = Field(..., ge=0, le=150)
    jurisdiction: str | int = Field(..., description="Jurisdiction identifier or numeric code")
    accredited: int = Field(default=0, ge=0, le=1)
    credential_hash: str = Field(..., description="Full 0x-prefixed credential hash")
    user_address: str = Field(..., description="Wallet the proof is bound to")
    passport_number: str = Field(..., description="Document number; seeds the nullifier")
    expiry_date: int = Field(..., ge=0, description="Document expiry, unix seconds")

    @field_validator("credential_hash")
    @classmethod
    def validate_credential_hash(cls, v: str) -> str:
        return normalize_credential_hash(v)

    @field_validator("user_address")
    @classmethod
    def validate_user_address(cls, v: str) -> str:
        return normalize_address(v)


class PolicyInput(BaseModel):
    """Policy to prove against, as published by the relying party."""

    min_age: int = Field(default=0, ge=0)
    allowed_jurisdictions: list[str | int] = Field(default_factory=list)
    require_accredited: bool = False


class GenerateProofRequest(BaseModel):
    """Request to generate a KYC proof."""

    credential: CredentialInput
    requirements: PolicyInput
    current_date: int | None = Field(default=None, ge=0, description="Defaults to now")


class GenerateProofResponse(BaseModel):
    """Generated proof with its public signals."""

    success: bool = True
    proof: dict[str, Any]
    public_signals: list[str]
    credential_hash: str
    is_valid: bool
    packed_flags: int
    proving_time_ms: int


def build_circuit_inputs(request: GenerateProofRequest) -> tuple[IdentityWitness, PublicParams]:
    """
    Convert plain attributes into the witness and public inputs.

    Raises:
        ValueError: If a jurisdiction, document number or list is invalid
    """
    credential = request.credential
    policy = request.requirements
    credential_hash = truncate_credential_hash(credential.credential_hash)
    actual_jurisdiction = jurisdiction_codes([credential.jurisdiction])
    if not actual_jurisdiction:
        raise ValueError("Credential jurisdiction must be non-empty")

    witness = IdentityWitness(
        actual_age=credential.age,
        actual_jurisdiction=actual_jurisdiction[0],
        actual_accredited=credential.accredited,
        credential_hash=credential_hash,
        passport_number=passport_number_to_field(credential.passport_number),
        expiry_date=credential.expiry_date,
    )
    params = PublicParams(
        min_age=policy.min_age,
        allowed_jurisdictions=pad_slots(jurisdiction_codes(policy.allowed_jurisdictions)),
        require_accredited=int(policy.require_accredited),
        credential_hash_public=credential_hash,
        recipient_address=address_to_int(credential.user_address),
        current_date=request.current_date if request.current_date is not None else int(time.time()),
        sanctioned_countries=pad_slots(jurisdiction_codes(settings.circuit.sanctioned_countries_list)),
    )
    return witness, params


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/generate", response_model=GenerateProofResponse)
async def generate_proof(request: GenerateProofRequest, backend: BackendDep) -> GenerateProofResponse:
    """
    Generate a proof that the credential satisfies the policy.

    A proof is returned even when a predicate fails; its public signals then
    report isValid=0 and verification will reject it.
    """
    logger.info(
        "generating_kyc_proof",
        backend=backend.name,
        min_age=request.requirements.min_age,
        jurisdiction_count=len(request.requirements.allowed_jurisdictions),
    )

    try:
        witness, params = build_circuit_inputs(request)
    except ValueError as e:
        logger.warning("kyc_proof_validation_error", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    try:
        bundle = await asyncio.to_thread(backend.prove, witness, params)
    except FileNotFoundError as e:
        logger.error("circuit_files_not_found", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Circuit build artefacts not available. Run circuit setup first.",
        ) from e
    except ProofGenerationError as e:
        logger.error("kyc_proof_generation_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Proof generation failed",
        ) from e

    signals = bundle.public_signals
    return GenerateProofResponse(
        proof=bundle.proof.model_dump(),
        public_signals=signals.to_strings(),
        credential_hash=request.credential.credential_hash,
        is_valid=signals.is_valid == 1,
        packed_flags=signals.packed_flags,
        proving_time_ms=bundle.metadata.proving_time_ms,
    )

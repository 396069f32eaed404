"""
User Routes
===========

Public access lookups.
"""

from fastapi import APIRouter

from services.access_control.dependencies import LedgerDep, address_param
from services.access_control.routes.protocol import AccessStatusResponse


router = APIRouter()


@router.get("/access/{protocol}/{user}", response_model=AccessStatusResponse)
async def get_access(protocol: str, user: str, ledger: LedgerDep) -> AccessStatusResponse:
    """Whether ``user`` holds access at ``protocol``."""
    protocol_address = address_param(protocol, "protocol address")
    user_address = address_param(user, "user address")
    grant = ledger.verifier.access_grant(protocol_address, user_address)

    return AccessStatusResponse(
        has_access=grant.granted,
        protocol_address=protocol_address,
        user_address=user_address,
        credential_hash=grant.credential_hash,
    )

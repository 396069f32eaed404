"""
FastAPI Authentication Dependencies
===================================

Resolves the calling wallet from the bearer token.

Version: 0.1.0
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel, Field

from noah.auth.jwt import decode_token
from noah.identity.credentials import is_valid_address, normalize_address
from noah.logging import get_logger


logger = get_logger(__name__)

# OAuth2 scheme for token extraction from Authorization header
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/auth/token",
    auto_error=False,
)


class Caller(BaseModel):
    """
    Authenticated caller.

    Only the wallet is carried. What the wallet may do is decided by the
    ledger, e.g. issuer trust by the registry's ``IssuerDirectory``.
    """

    address: str = Field(..., description="Lower-cased wallet address")


async def get_current_caller(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> Caller:
    """
    Extract the caller's wallet from the JWT token.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or its subject
            is not a wallet address
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if token is None:
        logger.warning("auth_token_missing")
        raise credentials_exception

    token_data = decode_token(token)

    if token_data is None:
        logger.warning("auth_token_invalid")
        raise credentials_exception

    if not is_valid_address(token_data.sub):
        logger.warning("auth_subject_not_address", sub=token_data.sub)
        raise credentials_exception

    address = normalize_address(token_data.sub)
    logger.debug("caller_authenticated", caller=address)

    return Caller(address=address)

"""
Authentication Module
=====================

JWT bearer tokens whose subject is the caller's wallet address.

Usage:
    from noah.auth import create_access_token, get_current_caller

    token = create_wallet_token("0x742d35Cc6634C0532925a3b844Bc454e4438f44e")

    @router.post("/protected")
    async def protected(caller: Caller = Depends(get_current_caller)):
        return {"caller": caller.address}
"""

from noah.auth.dependencies import Caller, get_current_caller, oauth2_scheme
from noah.auth.jwt import TokenData, create_access_token, create_wallet_token, decode_token


__all__ = [
    # JWT
    "create_access_token",
    "create_wallet_token",
    "decode_token",
    "TokenData",
    # Dependencies
    "Caller",
    "get_current_caller",
    "oauth2_scheme",
]

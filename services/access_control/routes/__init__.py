"""
Access Control Service Routes
=============================

API route handlers for the access control service.
"""

from services.access_control.routes import issuer, proofs, protocol, user


__all__ = ["issuer", "proofs", "protocol", "user"]

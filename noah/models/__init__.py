"""
Shared Models
=============

Response envelopes used across the HTTP surface.
"""

from noah.models.common import ErrorResponse, HealthResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
]

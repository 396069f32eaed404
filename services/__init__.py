"""
NOAH Services
=============

HTTP services for the NOAH ZK-KYC platform.

Services:
- access_control: credential issuance, relying-party policies, proof
  verification and access grants
"""

__all__ = [
    "access_control",
]

"""
Access Control Service
======================

HTTP surface over the ledger:
- Credential registration and revocation for trusted issuers
- Policy management and proof-gated access for relying parties
- Access status lookups for users
- Witness assembly and proof generation

Version: 0.1.0
"""

__version__ = "0.1.0"

"""
NOAH ZK-KYC Library
===================

Zero-knowledge KYC: a predicate circuit over private identity attributes,
a global credential registry with identity nullifiers, and per-relying-party
policy verification.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - identity: Credential hashes, jurisdiction codes, address helpers
    - circuit: KYC predicate circuit and public signal layout
    - zk: Proof backends (mock, gnark)
    - ledger: Credential registry, policy verifier, event log
    - auth: JWT caller identity
    - models: Shared response models

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Noah Team"

from noah.config import settings
from noah.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]

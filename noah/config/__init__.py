"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from noah.config import settings

    print(settings.environment)
    print(settings.ledger.freshness_window_seconds)
"""

from noah.config.settings import (
    Environment,
    LedgerMode,
    LogLevel,
    ProofBackendKind,
    Settings,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
    "LedgerMode",
    "ProofBackendKind",
]

"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LedgerMode(str, Enum):
    """Ledger operation mode."""

    MOCK = "mock"
    TESTNET = "testnet"
    MAINNET = "mainnet"


class ProofBackendKind(str, Enum):
    """Proving backend selection."""

    MOCK = "mock"
    GNARK = "gnark"


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class LedgerSettings(BaseSettings):
    """Credential registry and policy verifier configuration."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    mode: LedgerMode = LedgerMode.MOCK

    # Registry administrator; may revoke any credential
    admin_address: str = "0x0000000000000000000000000000000000000a11"

    # Comma separated issuer wallet addresses
    trusted_issuers: str = ""

    # Maximum age of a proof's currentDate at verification time
    freshness_window_seconds: int = Field(default=3600, ge=1)

    @property
    def trusted_issuers_list(self) -> list[str]:
        """Parse trusted issuers string into a lower-cased list."""
        return [address.lower() for address in _split_csv(self.trusted_issuers)]


class CircuitSettings(BaseSettings):
    """ZK circuit and proving backend configuration."""

    model_config = SettingsConfigDict(env_prefix="CIRCUIT_")

    backend: ProofBackendKind = ProofBackendKind.MOCK

    # gnark build artefacts (circuit.ccs, proving_key.pk, verification_key.vk)
    build_dir: Path = Field(
        default_factory=lambda: Path(__file__).parent.parent.parent / "build",
    )
    prover_command: str = "go run ./cmd/prove"
    verifier_command: str = "go run ./cmd/verify-proof"

    # ISO country codes published as the sanctioned list of every proof
    sanctioned_countries: str = ""

    # HMAC key standing in for the verifying key of the mock backend
    mock_verifying_key: SecretStr = SecretStr("noah-mock-verifying-key")

    @property
    def sanctioned_countries_list(self) -> list[str]:
        """Parse sanctioned countries string into a list of codes."""
        return _split_csv(self.sanctioned_countries)


class JWTSettings(BaseSettings):
    """JWT authentication configuration."""

    model_config = SettingsConfigDict(env_prefix="JWT_")

    secret_key: SecretStr = SecretStr("your-jwt-secret-key-min-32-chars-long")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return _split_csv(self.origins)


class ServicePorts(BaseSettings):
    """Service port configuration."""

    access_control: int = Field(default=8010, alias="ACCESS_CONTROL_PORT")


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO

    # Project paths
    project_root: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)

    # Service ports
    ports: ServicePorts = Field(default_factory=ServicePorts)

    # Protocol
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    circuit: CircuitSettings = Field(default_factory=CircuitSettings)

    # Authentication
    jwt: JWTSettings = Field(default_factory=JWTSettings)

    # Security
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()

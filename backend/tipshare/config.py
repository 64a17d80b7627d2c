"""
TipShare Backend: Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading, validated once on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py; the services never read it directly. The signing
       secret and store location are handed to them at construction.
When:  Loaded once at module import time; validated before app starts.
"""

from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "change-me"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development.
    Production deployments MUST override JWT_SECRET.
    """

    # ── Persisted Store ───────────────────────────────────────────────────
    # What: Path of the single JSON document holding users and tips
    # The file may be absent; it is created on the first write.
    data_file: str = Field(
        default="./data/data.json",
        description="Path to the JSON document used as the datastore",
    )

    # What: Indentation used when the document is written back to disk
    # 0 writes the most compact form the json module produces with indent=0
    store_indent: int = Field(default=2, ge=0, le=8)

    # What: How concurrent load → mutate → save sequences are coordinated
    #   serialized:     one in-process lock around every mutating sequence
    #   unsynchronized: no coordination, last writer wins without detection
    store_concurrency: Literal["serialized", "unsynchronized"] = Field(
        default="serialized"
    )

    # ── Identity Tokens ───────────────────────────────────────────────────
    # What: HMAC key used to sign and verify identity tokens
    # Rotating it invalidates every token issued with the previous key.
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET, min_length=1)

    # What: Token lifetime in seconds (one hour by default)
    token_ttl_seconds: int = Field(default=3600, ge=60, le=86400)

    # ── CORS ──────────────────────────────────────────────────────────────
    # What: Allowed origins for the browser client
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # What: Verbosity of application logging
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # JWT_SECRET and jwt_secret both work
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that security-sensitive settings were overridden.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if self.jwt_secret == DEFAULT_JWT_SECRET:
            errors.append(
                "JWT_SECRET is still the development default. "
                "Set it to a long random value before exposing the service."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance used by the default application in main.py
settings = Settings()

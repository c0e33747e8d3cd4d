"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from nft_registry.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import MINT_DATE_FORMAT, NOTIFY_METHOD


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# REGISTRY MODEL
# =============================================================================

class LogoConfig(StrictModel):
    """Collection logo."""

    logo_type: str = Field(description="MIME type, e.g. image/png")
    data: str = Field(description="Base64 image data")


class RegistryConfig(StrictModel):
    """Registry initialization arguments.

    ``custodians`` defaults to the initializing caller when omitted.
    ``total_limit`` is stored and reported but never enforced.
    """

    name: str = Field(default="", description="Collection name")
    symbol: str = Field(default="", description="Collection symbol")
    logo: LogoConfig | None = Field(default=None, description="Logo (default logo when unset)")
    custodians: list[str] | None = Field(
        default=None,
        description="Initial custodians (None = the initializing caller)"
    )
    whitelist: list[str] = Field(
        default_factory=list,
        description="Principals allowed to receive public mints"
    )
    begin_date: str = Field(description=f"Public mint window start ({MINT_DATE_FORMAT}, UTC)")
    end_date: str = Field(description=f"Public mint window end ({MINT_DATE_FORMAT}, UTC)")
    total_limit: str = Field(default="", description="Supply limit (informational only)")

    @field_validator("begin_date", "end_date")
    @classmethod
    def check_date_format(cls, value: str) -> str:
        datetime.strptime(value, MINT_DATE_FORMAT)
        return value


# =============================================================================
# NOTIFICATION MODEL
# =============================================================================

class NotificationConfig(StrictModel):
    """Transfer notification configuration."""

    enabled: bool = Field(default=True, description="Dispatch onDIP721Received notifications")
    method: str = Field(
        default=NOTIFY_METHOD,
        min_length=1,
        description="Method invoked on the transfer recipient"
    )


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    output_file: str = Field(
        default="registry_events.jsonl",
        description="JSONL file for registry mutation events"
    )
    default_recent: int = Field(
        default=50,
        gt=0,
        description="Default number of recent events to return"
    )
    level: str = Field(default="INFO", description="Python logging level")


# =============================================================================
# CHECKPOINT MODEL
# =============================================================================

class CheckpointConfig(StrictModel):
    """Snapshot/restore configuration."""

    checkpoint_file: str = Field(
        default="registry_checkpoint.json",
        description="Where registry snapshots are written"
    )


# =============================================================================
# ROOT CONFIG MODEL
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model for the entire application."""

    registry: RegistryConfig
    notification: NotificationConfig = Field(default_factory=NotificationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    checkpoint: CheckpointConfig = Field(default_factory=CheckpointConfig)


# =============================================================================
# LOADING FUNCTIONS
# =============================================================================

def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


__all__ = [
    "AppConfig",
    "RegistryConfig",
    "LogoConfig",
    "NotificationConfig",
    "LoggingConfig",
    "CheckpointConfig",
    "load_validated_config",
    "validate_config_dict",
]

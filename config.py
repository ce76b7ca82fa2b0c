"""
Configuration module for environment variable validation and type-safe config.

This module validates the gateway's environment variables and provides a
type-safe configuration object shared by the handler and service layer.
"""
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


DEFAULT_TABLE_NAME = "TurnaroundPrompt"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean value, got: {raw}")


def _parse_csv(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass
class Config:
    """Type-safe configuration object with validated environment variables."""

    table_name: str = DEFAULT_TABLE_NAME
    aws_region: str = "us-east-1"
    dynamodb_endpoint_url: Optional[str] = None
    api_keys: Tuple[str, ...] = field(default_factory=tuple)
    api_key_required: bool = True
    cors_allow_origin: str = "*"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create Config instance from environment variables.

        Raises:
            ValueError: If environment variables are missing or invalid.
        """
        table_name = os.environ.get("TABLE_NAME", "").strip() or DEFAULT_TABLE_NAME
        aws_region = os.environ.get("AWS_REGION", "us-east-1")
        dynamodb_endpoint_url = os.environ.get("DYNAMODB_ENDPOINT_URL") or None

        api_keys = _parse_csv(os.environ.get("API_KEYS", ""))
        api_key_required = _parse_bool(
            "API_KEY_REQUIRED", os.environ.get("API_KEY_REQUIRED", "true")
        )
        if api_key_required and not api_keys:
            raise ValueError(
                "API_KEYS environment variable is required when API_KEY_REQUIRED is enabled"
            )

        cors_allow_origin = os.environ.get("CORS_ALLOW_ORIGIN", "*").strip() or "*"
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

        # Validate log level
        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if log_level not in valid_log_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {valid_log_levels}, got: {log_level}"
            )

        return cls(
            table_name=table_name,
            aws_region=aws_region,
            dynamodb_endpoint_url=dynamodb_endpoint_url,
            api_keys=api_keys,
            api_key_required=api_key_required,
            cors_allow_origin=cors_allow_origin,
            log_level=log_level,
        )


# Global config instance, built on first use so tests can set env vars first
_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config: The validated configuration object

    Raises:
        ValueError: If environment variables are missing or invalid.
    """
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None

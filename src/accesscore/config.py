"""Configuration contract for accesscore consumers.

Pydantic-validated settings shared by every service that resolves
permissions (log level and format, restriction matching mode). Direct
os.environ/os.getenv usage is limited to load_config_from_env().
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .permissions.constants import RestrictionMatch


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AccessConfig(BaseModel):
    """Settings for permission resolution and its logging.

    ``restriction_match`` selects how the restriction validator finds the
    catalog entries that bind a token. ``prefix`` keeps the historical
    string-prefix behaviour for byte-for-byte compatible decisions;
    ``boundary`` only matches whole path segments.
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the service",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used for the logger hierarchy (e.g., 'volunteer-manager')",
    )

    # Permission resolution
    restriction_match: RestrictionMatch = Field(
        default=RestrictionMatch.BOUNDARY,
        description="Catalog matching mode for restricted permissions: boundary | prefix",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("restriction_match", mode="before")
    @classmethod
    def validate_restriction_match(cls, v: str | RestrictionMatch) -> RestrictionMatch:
        """Accept the match mode case-insensitively."""
        if isinstance(v, RestrictionMatch):
            return v
        if isinstance(v, str):
            try:
                return RestrictionMatch(v.strip().lower())
            except ValueError:
                raise ValueError(
                    f"Invalid restriction match: {v}. Must be one of {[e.value for e in RestrictionMatch]}"
                )
        raise ValueError(f"Restriction match must be string or RestrictionMatch enum, got {type(v)}")

    model_config = {
        "extra": "forbid",  # Prevent accidental extra fields
    }


def load_config_from_env() -> AccessConfig:
    """Load configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name for the logger hierarchy
    - PERMISSION_RESTRICTION_MATCH: boundary | prefix (default: boundary)

    Returns:
        AccessConfig instance with values from environment or defaults.
    """
    import os

    return AccessConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
        service_name=os.getenv("SERVICE_NAME"),
        restriction_match=os.getenv("PERMISSION_RESTRICTION_MATCH", "boundary"),
    )


__all__ = [
    "AccessConfig",
    "LogLevel",
    "load_config_from_env",
]

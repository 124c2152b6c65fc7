"""
Configuration management for QuantumCalc.

Handles loading configuration from environment variables and an optional
.env file, and provides sensible defaults for all settings.
"""

import logging
from pathlib import Path
from typing import Literal

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from quantum_calc.models import FallbackPolicies, FallbackPolicy, HistoryFormat

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="QCALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    app_name: str = "Quantum Calc"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Fallback policies
    parse_policy: FallbackPolicy = FallbackPolicy.LENIENT_ZERO
    unit_policy: FallbackPolicy = FallbackPolicy.LENIENT_IDENTITY
    rate_policy: FallbackPolicy = FallbackPolicy.LENIENT_IDENTITY

    # History
    history_format: HistoryFormat = HistoryFormat.COMPAT

    # Converter output
    display_max_chars: int = Field(10, ge=1)

    # Currency (rates are always relative to USD)
    rates_file: Path | None = None  # JSON rate table used by the CLI

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    def policies(self) -> FallbackPolicies:
        """Bundle the three policy settings."""
        return FallbackPolicies(
            parse=self.parse_policy,
            unknown_unit=self.unit_policy,
            missing_rate=self.rate_policy,
        )


# Global settings instance
settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """
    Install a structlog logger filtered at the given level name.

    Raises:
        ValueError: If the level name is not one of LOG_LEVELS
    """
    level_name = (level or settings.log_level).upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(
            f"Unknown log level {level_name!r} (expected one of {', '.join(LOG_LEVELS)})"
        )
    if settings.debug:
        level_name = "DEBUG"
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVELS[level_name]),
    )

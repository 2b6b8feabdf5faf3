"""
Configuration Management for Ledger Reports

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Directories, precision and concurrency limits are validated once at
startup instead of being re-checked by every component.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportSettings(BaseSettings):
    """Report engine configuration: where ledgers live and where reports go."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_REPORTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    input_dir: Path = Field(
        default=Path("ledgers"),
        description="Directory holding the per-account ledger CSV files"
    )
    output_dir: Path = Field(
        default=Path("out"),
        description="Directory the generated reports are written to"
    )
    amount_precision: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places used when writing report values"
    )
    max_concurrent_reads: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Maximum ledger files read at once within a single job"
    )
    job_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Abort a report job that runs longer than this (unset = no limit)"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of ledger files and reports"
    )

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Reject encodings Python does not know about."""
        import codecs

        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown text encoding: {v}")
        return v


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level (DEBUG, INFO, WARNING, ERROR)"
    )
    json_output: bool = Field(
        default=True,
        description="Render logs as JSON (False = human-readable console output)"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def reports(self) -> ReportSettings:
        return ReportSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus `<name>_error`
    entries describing what is wrong. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        reports = settings.reports
        results["reports"] = True
        if reports.input_dir.is_dir():
            results["input_dir"] = True
        else:
            results["input_dir"] = False
            results["input_dir_error"] = f"Input directory not found: {reports.input_dir}"
    except Exception as e:
        results["reports"] = False
        results["reports_error"] = str(e)

    try:
        _ = settings.logging
        results["logging"] = True
    except Exception as e:
        results["logging"] = False
        results["logging_error"] = str(e)

    return results

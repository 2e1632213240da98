"""Configuration management for lab sheet extraction.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
LSE_ prefix, or via a .env file in the project root.

The scoring constants below were tuned empirically against real lab
reports. They are heuristics, not correctness requirements, so they are
exposed as settings rather than hard-coded.

Environment Variables:
    LSE_FUZZY_MATCH_THRESHOLD: Min normalized Levenshtein similarity (default: 0.8)
    LSE_BASE_CONFIDENCE: Base score for any successful parse (default: 30)
    LSE_CONFIDENCE_CAP: Upper bound on overall confidence (default: 95)
    LSE_AVERAGE_WEIGHT: Weight of the mean per-parameter confidence (default: 0.4)
    LSE_PER_PARAMETER_BONUS: Bonus per distinct parameter found (default: 5)
    LSE_MAX_PARAMETER_BONUS: Cap on the parameter bonus (default: 30)
    LSE_STRUCTURE_BONUS: Bonus when matches are mostly structured (default: 15)
    LSE_STRUCTURE_BONUS_THRESHOLD: Mean confidence above which the
        structure bonus applies (default: 80)
    LSE_FALLBACK_CONFIDENCE: Confidence of regex fallback matches (default: 50)
    LSE_LAYOUT_RATIO_THRESHOLD: Row ratio for layout classification (default: 0.6)
    LSE_INCLUDE_FORMULAS: Keep formula text when no cached result (default: true)
    LSE_MAX_ROWS: Optional row limit when loading workbooks
    LSE_MAX_COLUMNS: Optional column limit when loading workbooks
    LSE_BATCH_TIMEOUT_SECONDS: Per-file timeout for batch runs (default: 30)
    LSE_BATCH_MAX_CONCURRENCY: Files processed at once in batch runs (default: 4)
    LSE_LOG_LEVEL: Logging level (default: INFO)
    LSE_DEBUG: Log at DEBUG and record every match (default: false)

Applications call :func:`configure` once at startup to apply the logging
settings and run the startup checks.
"""

import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lab_sheet_extraction.utils.logging import configure_logging


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Example .env file:
        LSE_FUZZY_MATCH_THRESHOLD=0.85
        LSE_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="LSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # =========================================================================
    # Label Matching Settings
    # =========================================================================

    fuzzy_match_threshold: float = 0.8
    """Minimum normalized Levenshtein similarity for a fuzzy label match."""

    # =========================================================================
    # Confidence Scoring Settings
    # =========================================================================

    base_confidence: int = 30
    """Base confidence granted to any extraction that found a parameter."""

    confidence_cap: int = 95
    """Overall confidence never exceeds this value."""

    average_weight: float = 0.4
    """Weight applied to the mean per-parameter confidence."""

    per_parameter_bonus: int = 5
    """Bonus added for each distinct parameter found."""

    max_parameter_bonus: int = 30
    """Upper bound of the accumulated per-parameter bonus."""

    structure_bonus: int = 15
    """Bonus applied when the mean per-parameter confidence is high."""

    structure_bonus_threshold: int = 80
    """Mean confidence that must be exceeded to earn the structure bonus."""

    fallback_confidence: int = 50
    """Confidence assigned to values recovered by the regex fallback."""

    # =========================================================================
    # Layout Classification Settings
    # =========================================================================

    layout_ratio_threshold: float = 0.6
    """Row ratio above which a sheet is classified as key-value or table."""

    # =========================================================================
    # Workbook Loading Settings
    # =========================================================================

    include_formulas: bool = True
    """Use formula text as the value of formula cells with no cached result."""

    max_rows: int | None = None
    """Optional limit on rows read from each worksheet."""

    max_columns: int | None = None
    """Optional limit on columns read from each worksheet."""

    # =========================================================================
    # Batch Settings
    # =========================================================================

    batch_timeout_seconds: float = 30.0
    """Per-file timeout applied by the batch helper."""

    batch_max_concurrency: int = 4
    """Maximum number of workbooks processed concurrently by the batch helper."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Log at DEBUG and record every label/value match found."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator(
        "fuzzy_match_threshold", "average_weight", "layout_ratio_threshold"
    )
    @classmethod
    def validate_ratio(cls, v: float) -> float:
        """Validate ratio is between 0.0 and 1.0."""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Value must be between 0.0 and 1.0, got {v}")
        return v

    @field_validator(
        "base_confidence",
        "confidence_cap",
        "per_parameter_bonus",
        "max_parameter_bonus",
        "structure_bonus",
        "structure_bonus_threshold",
        "fallback_confidence",
    )
    @classmethod
    def validate_confidence(cls, v: int) -> int:
        """Validate confidence-like values are between 0 and 100."""
        if not 0 <= v <= 100:
            raise ValueError(f"Confidence must be between 0 and 100, got {v}")
        return v

    @field_validator("max_rows", "max_columns")
    @classmethod
    def validate_limits(cls, v: int | None) -> int | None:
        """Validate optional load limits are positive."""
        if v is not None and v < 1:
            raise ValueError(f"Load limits must be at least 1, got {v}")
        return v

    @field_validator("batch_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate batch timeout is positive."""
        if v <= 0:
            raise ValueError(f"batch_timeout_seconds must be positive, got {v}")
        return v

    @field_validator("batch_max_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        """Validate batch concurrency is reasonable."""
        if not 1 <= v <= 64:
            raise ValueError(
                f"batch_max_concurrency must be between 1 and 64, got {v}"
            )
        return v

    @model_validator(mode="after")
    def validate_bonus_settings(self) -> "Settings":
        """Validate the per-parameter bonus does not exceed its own cap."""
        if self.per_parameter_bonus > self.max_parameter_bonus:
            raise ValueError(
                f"per_parameter_bonus ({self.per_parameter_bonus}) must not exceed "
                f"max_parameter_bonus ({self.max_parameter_bonus})"
            )
        return self

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module; DEBUG in debug mode."""
        if self.debug:
            return logging.DEBUG
        level: int = getattr(logging, self.log_level)
        return level


def validate_settings_on_startup(s: Settings) -> None:
    """Log warnings for settings that are legal but likely mistakes.

    Args:
        s: Settings instance to validate.
    """
    logger = logging.getLogger(__name__)

    if s.fallback_confidence >= s.structure_bonus_threshold:
        logger.warning(
            "fallback_confidence is not below structure_bonus_threshold. "
            "Regex fallback matches will earn the structure bonus."
        )

    if s.fuzzy_match_threshold < 0.5:
        logger.warning(
            "fuzzy_match_threshold is below 0.5. Short labels will match "
            "almost any text."
        )

    logger.info(
        f"Configuration loaded: log_level={s.log_level}, debug={s.debug}, "
        f"fuzzy_match_threshold={s.fuzzy_match_threshold}, "
        f"confidence_cap={s.confidence_cap}"
    )


# Create the global settings instance
settings = Settings()


def configure(s: Settings | None = None) -> Settings:
    """Set up process-wide logging from settings and report suspicious values.

    Call once from the application embedding the engine, before the first
    extraction. The library itself never configures logging.

    Args:
        s: Settings to apply; the module-level ``settings`` when None.

    Returns:
        The settings that were applied.
    """
    s = s if s is not None else settings
    configure_logging(level=s.log_level_int, use_structured_formatter=True)
    validate_settings_on_startup(s)
    return s

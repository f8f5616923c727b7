"""Engine settings using Pydantic Settings.

Centralized configuration for the categorization suggestion engine.

Jurisdiction constants (brackets, $300 / $1,000 thresholds, pool rates)
live in calculator.tax_year_config. The values here are engine tunables:
which tax year to load and the cut-offs used for priority, confidence and
the "high impact" view.

Every field can be overridden with a SUGGESTIONS_ prefixed environment
variable, e.g. SUGGESTIONS_TAX_YEAR=2026.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class SuggestionSettings(BaseSettings):
    """Categorization suggestion engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="SUGGESTIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Tax year (ATO year ending 30 June, e.g. 2025 = 2024-25)
    tax_year: int = Field(default=2025, description="Income year used for brackets and thresholds")

    # Rule tunables
    large_asset_threshold: float = Field(
        default=1000.0,
        gt=0,
        description="Immediate deductions at or above this amount are flagged as missing depreciation",
    )
    move_to_pool_high_priority_delta: float = Field(
        default=100.0,
        ge=0,
        description="Move-to-pool suggestions above this tax impact are raised to high priority",
    )
    move_to_pool_high_confidence_improvement: float = Field(
        default=50.0,
        ge=0,
        description="Percentage improvement above which a move-to-pool match is high confidence",
    )
    assume_first_year: bool = Field(
        default=True,
        description="Compare pooled treatment using first-year (18.75%) rather than 37.5%",
    )

    # Review views
    high_impact_threshold: float = Field(
        default=50.0,
        ge=0,
        description="Absolute tax impact above which a suggestion counts as high impact",
    )

    @field_validator("tax_year")
    @classmethod
    def validate_tax_year(cls, v: int) -> int:
        if v < 2000 or v > 2100:
            raise ValueError(f"tax_year out of range: {v}")
        return v


@lru_cache()
def get_settings() -> SuggestionSettings:
    """Get cached settings instance."""
    settings = SuggestionSettings()
    logger.debug(f"Loaded suggestion settings for tax year {settings.tax_year}")
    return settings

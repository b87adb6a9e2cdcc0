"""
Configuration Management for the Finance Engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Every threshold the rules depend on lives here.
The defaults are the production values; overriding them is meant for
experiments and tests, not for per-household tuning.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """
    Engine settings.

    Loads configuration from FINANCE_ENGINE_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable domain debug logging (never active in production)"
    )

    # Forecast
    risk_preview_min_days: int = Field(
        default=5,
        ge=0,
        description="Minimum days left in the month to show a risk preview"
    )

    # Risk assessment
    overdue_action_threshold_days: int = Field(
        default=7,
        ge=0,
        description="Overdue notifications escalate to 'action' above this many days"
    )
    coverage_window_min_days: int = Field(
        default=1,
        ge=0,
        description="Earliest days-until-due considered for coverage risk"
    )
    coverage_window_max_days: int = Field(
        default=7,
        ge=0,
        description="Latest days-until-due considered for coverage risk"
    )

    # Future projection
    safety_buffer_percent: float = Field(
        default=10.0,
        ge=0.0,
        le=100.0,
        description="Share of current balance kept aside as a safety buffer"
    )
    historical_months: int = Field(
        default=3,
        ge=1,
        le=24,
        description="How many past months feed the variable spending average"
    )
    high_confidence_min_days: int = Field(
        default=7,
        ge=0,
        description="Days elapsed required for a 'high' confidence projection"
    )
    medium_confidence_min_days: int = Field(
        default=3,
        ge=0,
        description="Days elapsed required for a budget-based 'medium' projection"
    )

    # Metadata sanitization
    metadata_max_bytes: int = Field(
        default=900,
        ge=64,
        description="Maximum serialized size of sanitized metadata"
    )

    @model_validator(mode='after')
    def validate_windows(self) -> 'EngineSettings':
        """Validate threshold relationships."""
        if self.coverage_window_max_days < self.coverage_window_min_days:
            raise ValueError("Coverage window max cannot be below min")
        return self

    @property
    def is_production(self) -> bool:
        return self.app_environment.lower() == "production"

    @property
    def logging_enabled(self) -> bool:
        """Debug logging is only ever on outside production."""
        return self.debug_mode and not self.is_production


@lru_cache()
def get_settings() -> EngineSettings:
    """
    Get engine settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return EngineSettings()

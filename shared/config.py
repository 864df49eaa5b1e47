"""
Shared configuration management for RuleForge.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuleForgeSettings(BaseSettings):
    """Engine settings, read from RULEFORGE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RULEFORGE_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Evaluation defaults used by RuleForge when a run does not say otherwise
    fire_on_pass: bool = Field(default=True)
    fail_on_infinite: bool = Field(default=False)

    # NOTEQUAL on numeric attributes behaves like EQUAL when enabled
    legacy_numeric_not_equal: bool = Field(default=False)

    # Observability
    enable_metrics: bool = Field(default=True)


def get_config(**overrides) -> RuleForgeSettings:
    """Get engine configuration, with optional explicit overrides."""
    return RuleForgeSettings(**overrides)

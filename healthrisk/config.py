"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Scoring parameters stay in code; only operational knobs are configurable
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load environment variables from .env file
load_dotenv()

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Environment = Literal["development", "staging", "production"]


class AnalyticsConfig(BaseModel):
    """Operational settings for the risk analytics service."""

    observation_history_limit: int = Field(
        default=30, gt=0, description="Most recent observations fetched for trend detection"
    )
    min_trend_observations: int = Field(
        default=7,
        gt=0,
        description="Observations needed before trends are reported (informational)",
    )
    storage_timeout_seconds: float = Field(
        default=5.0, gt=0.0, description="Timeout for each collaborator call"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default="INFO", description="Logging level")
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Environment = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Enable debug mode")

    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Environment:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> LogLevel:
        v = val.strip().upper()
        return cast(
            LogLevel, v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO"
        )

    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    analytics_config = AnalyticsConfig(
        observation_history_limit=int(os.getenv("OBSERVATION_HISTORY_LIMIT", "30")),
        storage_timeout_seconds=float(os.getenv("STORAGE_TIMEOUT_SECONDS", "5.0")),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        analytics=analytics_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\n🔧 CONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level} ({config.logging.format})")

    print("\n🩺 ANALYTICS CONFIGURATION")
    print(f"Observation History: {config.analytics.observation_history_limit} entries")
    print(f"Storage Timeout: {config.analytics.storage_timeout_seconds}s")


if __name__ == "__main__":
    print_config_summary()

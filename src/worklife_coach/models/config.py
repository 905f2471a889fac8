"""
Configuration Models

Pydantic models for coach configuration validation.
"""

import json
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationInfo, field_validator

CONFIG_PATH_ENV = "WORKLIFE_COACH_CONFIG"
LOG_LEVEL_ENV = "WORKLIFE_COACH_LOG_LEVEL"


class SessionConfig(BaseModel):
    """Inactivity timing for coaching sessions, in seconds."""

    timeout_seconds: float = Field(default=1800.0, gt=0)
    warning_seconds: float = Field(default=1500.0, gt=0)

    @field_validator("warning_seconds")
    @classmethod
    def validate_warning_before_timeout(cls, v: float, info: ValidationInfo) -> float:
        """Validate that the warning window opens before the timeout."""
        timeout = info.data.get("timeout_seconds", 1800.0)
        if v >= timeout:
            raise ValueError(
                f"warning_seconds ({v}) must be less than timeout_seconds ({timeout})"
            )
        return v


class RetryConfig(BaseModel):
    """Bounded retry with exponential backoff for data store calls."""

    max_attempts: int = Field(default=3, ge=1, le=10)
    initial_delay: float = Field(default=0.1, ge=0.0)
    backoff_multiplier: float = Field(default=2.0, ge=1.0)
    max_delay: float = Field(default=5.0, ge=0.0)


class CoachingConfig(BaseModel):
    """Limits applied when composing responses."""

    max_career_paths: int = Field(default=3, gt=0, le=10)
    max_skill_recommendations: int = Field(default=5, gt=0, le=20)
    history_limit: int = Field(default=10, gt=0)


class CoachParams(BaseModel):
    """Coach parameters configuration model."""

    session: SessionConfig = Field(default_factory=SessionConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    coaching: CoachingConfig = Field(default_factory=CoachingConfig)
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="logs/worklife-coach.log")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> "CoachParams":
        """Load coach parameters from config file.

        Environment variables (optionally from a .env file) may name the
        config file and override the log level.

        Args:
            config_path: Path to coach_params.json (defaults to
                $WORKLIFE_COACH_CONFIG, then config/coach_params.json)

        Returns:
            CoachParams: Validated configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the file fails schema validation
            ValueError: If config validation fails
        """
        # Local import: utils.errors imports RetryConfig from this module
        from ..utils.validator import ConfigValidator

        load_dotenv()

        if config_path is None:
            config_path = Path(
                os.getenv(CONFIG_PATH_ENV, "config/coach_params.json")
            )
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}. "
                f"Copy {config_path.stem}.example.json to {config_path.name}"
            )

        with open(config_path, "r", encoding="utf-8") as f:
            config_data = json.load(f)

        ConfigValidator().validate(config_data, "coach_params_schema.json")

        log_level = os.getenv(LOG_LEVEL_ENV)
        if log_level:
            config_data["log_level"] = log_level

        return cls(**config_data)

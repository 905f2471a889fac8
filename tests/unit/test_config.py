"""
Unit tests for configuration models.
"""

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from worklife_coach.models.config import (
    CONFIG_PATH_ENV,
    LOG_LEVEL_ENV,
    CoachingConfig,
    CoachParams,
    RetryConfig,
    SessionConfig,
)
from worklife_coach.utils.errors import ConfigurationError


@pytest.fixture
def params_file(tmp_path):
    path = tmp_path / "coach_params.json"
    path.write_text(
        json.dumps(
            {
                "session": {"timeout_seconds": 120, "warning_seconds": 90},
                "retry": {"max_attempts": 5},
                "log_level": "warning",
            }
        )
    )
    return path


class TestDefaults:
    """Test cases for default configuration values."""

    def test_session_defaults(self):
        """Test that sessions time out after 30 minutes with a 25 minute warning."""
        config = SessionConfig()
        assert config.timeout_seconds == 1800
        assert config.warning_seconds == 1500

    def test_retry_defaults(self):
        """Test the default retry budget."""
        config = RetryConfig()
        assert config.max_attempts == 3
        assert config.backoff_multiplier == 2.0

    def test_coaching_defaults(self):
        """Test the default response limits."""
        config = CoachingConfig()
        assert config.max_career_paths == 3
        assert config.max_skill_recommendations == 5


class TestSessionConfig:
    """Test cases for SessionConfig validation."""

    def test_warning_must_precede_timeout(self):
        """Test that a warning at or after the timeout is rejected."""
        with pytest.raises(PydanticValidationError, match="must be less than"):
            SessionConfig(timeout_seconds=60, warning_seconds=60)

    def test_timeout_must_be_positive(self):
        """Test that a zero timeout is rejected."""
        with pytest.raises(PydanticValidationError):
            SessionConfig(timeout_seconds=0, warning_seconds=0.5)


class TestCoachParams:
    """Test cases for CoachParams."""

    def test_log_level_normalized(self):
        """Test that log levels are upper-cased."""
        assert CoachParams(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Test that unknown log levels are rejected."""
        with pytest.raises(PydanticValidationError, match="Log level must be one of"):
            CoachParams(log_level="chatty")

    def test_load_from_explicit_path(self, params_file, monkeypatch):
        """Test that load reads and validates the given file."""
        # Arrange
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)

        # Act
        params = CoachParams.load(params_file)

        # Assert
        assert params.session.timeout_seconds == 120
        assert params.retry.max_attempts == 5
        assert params.log_level == "WARNING"
        assert params.coaching.max_career_paths == 3

    def test_load_from_env_path(self, params_file, monkeypatch):
        """Test that the config path can come from the environment."""
        # Arrange
        monkeypatch.setenv(CONFIG_PATH_ENV, str(params_file))
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)

        # Act
        params = CoachParams.load()

        # Assert
        assert params.session.warning_seconds == 90

    def test_env_overrides_log_level(self, params_file, monkeypatch):
        """Test that the log level env var wins over the file."""
        # Arrange
        monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")

        # Act
        params = CoachParams.load(params_file)

        # Assert
        assert params.log_level == "ERROR"

    def test_load_missing_file(self, tmp_path):
        """Test that a missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="coach_params.example.json"):
            CoachParams.load(tmp_path / "coach_params.json")

    def test_load_rejects_unknown_keys(self, tmp_path):
        """Test that schema violations raise ConfigurationError."""
        # Arrange
        path = tmp_path / "coach_params.json"
        path.write_text(json.dumps({"sessions": {}}))

        # Act & Assert
        with pytest.raises(ConfigurationError):
            CoachParams.load(path)

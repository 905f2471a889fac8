"""
Unit tests for logger module.
"""

from unittest.mock import MagicMock

import structlog

from worklife_coach.utils.logger import configure_logging, get_logger, redact_sensitive


class TestRedactSensitive:
    """Test cases for redact_sensitive processor."""

    def test_masks_password_field(self):
        """Test that password fields are masked."""
        # Arrange
        logger = MagicMock()
        event_dict = {"event": "login", "username": "alice", "password": "secret123"}

        # Act
        result = redact_sensitive(logger, "info", event_dict)

        # Assert
        assert result["password"] == "***MASKED***"
        assert result["username"] == "alice"

    def test_masks_prefixed_and_suffixed_keys(self):
        """Test that keys like access_token and secret_value are masked."""
        # Arrange
        logger = MagicMock()
        event_dict = {"access_token": "eyJhbGci", "secret_value": "x", "api_key": "sk-1"}

        # Act
        result = redact_sensitive(logger, "info", event_dict)

        # Assert
        assert result["access_token"] == "***MASKED***"
        assert result["secret_value"] == "***MASKED***"
        assert result["api_key"] == "***MASKED***"

    def test_redacts_user_message_text(self):
        """Test that conversation text is replaced by its length."""
        # Arrange
        logger = MagicMock()
        event_dict = {"event": "request_received", "message_text": "I feel stuck"}

        # Act
        result = redact_sensitive(logger, "info", event_dict)

        # Assert
        assert result["message_text"] == "<redacted:12 chars>"
        assert result["event"] == "request_received"

    def test_redacts_plain_message_field(self):
        """Test that a bare message field is treated as conversation text."""
        # Arrange
        logger = MagicMock()
        event_dict = {"event": "request_received", "message": "I hate my boss"}

        # Act
        result = redact_sensitive(logger, "info", event_dict)

        # Assert
        assert result["message"] == "<redacted:14 chars>"

    def test_does_not_mask_similar_words(self):
        """Test that fields merely containing a sensitive word are kept."""
        # Arrange
        logger = MagicMock()
        event_dict = {"author": "bob", "tokens_used": 5, "session_id": "s1"}

        # Act
        result = redact_sensitive(logger, "info", event_dict)

        # Assert
        assert result == {"author": "bob", "tokens_used": 5, "session_id": "s1"}


class TestConfigureLogging:
    """Test cases for configure_logging."""

    def test_creates_log_directory(self, tmp_path):
        """Test that the log file's parent directory is created."""
        # Arrange
        log_file = tmp_path / "nested" / "coach.log"

        # Act
        configure_logging(str(log_file), "DEBUG")

        # Assert
        assert log_file.parent.exists()


class TestGetLogger:
    """Test cases for get_logger."""

    def test_binds_context(self):
        """Test that correlation, session, and component are bound."""
        # Act
        logger = get_logger(correlation_id="c-1", session_id="s-1", component="session_manager")

        # Assert
        context = structlog.get_context(logger)
        assert context["correlation_id"] == "c-1"
        assert context["session_id"] == "s-1"
        assert context["component"] == "session_manager"

    def test_generates_correlation_id(self):
        """Test that a correlation id is generated when none is given."""
        # Act
        logger = get_logger()

        # Assert
        context = structlog.get_context(logger)
        assert len(context["correlation_id"]) == 36
        assert "session_id" not in context

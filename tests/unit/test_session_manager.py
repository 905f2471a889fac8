"""
Unit tests for session lifecycle management.
"""

import threading
import time

import pytest

from worklife_coach.models.config import SessionConfig
from worklife_coach.models.core import Intent, IntentType, Message, MessageSender
from worklife_coach.session.session_manager import SessionManager
from worklife_coach.utils.errors import SessionNotFoundError, SessionTimeoutError


@pytest.fixture
def manager(clock):
    # Timers are far in the future; expiry is driven through the fake clock
    manager = SessionManager(
        SessionConfig(timeout_seconds=60, warning_seconds=50), clock=clock
    )
    yield manager
    manager.shutdown()


def user_message(text: str) -> Message:
    return Message(id=f"m-{text}", sender=MessageSender.USER, content=text)


class TestSessionLifecycle:
    """Test cases for creating, ending, and restoring sessions."""

    def test_create_session(self, manager, clock):
        """Test that a new session is live with a fresh context and a timer."""
        # Act
        session = manager.create_session("u1", "s1")

        # Assert
        assert session.user_id == "u1"
        assert session.start_time == clock.now
        assert session.context.conversation_history == []
        assert manager.get_session("s1") is session
        assert manager.has_pending_timer("s1")

    def test_update_activity_unknown_session(self, manager):
        """Test that refreshing a session that is not live raises."""
        with pytest.raises(SessionTimeoutError):
            manager.update_activity("missing")

    def test_end_session_preserves_and_removes(self, manager):
        """Test that ending a session snapshots it and stops its timer."""
        # Arrange
        manager.create_session("u1", "s1")
        manager.update_context("s1", messages=(user_message("hello"),))

        # Act
        manager.end_session("s1")

        # Assert
        assert manager.get_session("s1") is None
        assert not manager.has_pending_timer("s1")
        state = manager.get_preserved_state("s1")
        assert state is not None
        assert [m.content for m in state.context.conversation_history] == ["hello"]

    def test_end_unknown_session(self, manager):
        """Test that ending an unknown session raises SessionNotFoundError."""
        with pytest.raises(SessionNotFoundError):
            manager.end_session("missing")

    def test_restore_session(self, manager):
        """Test that a restored session carries the preserved context."""
        # Arrange
        manager.create_session("u1", "s1")
        manager.update_context(
            "s1",
            messages=(user_message("hello"),),
            intent=Intent(type=IntentType.SKILL_GUIDANCE, confidence=0.7),
            active_topics=["skills"],
        )
        manager.end_session("s1")

        # Act
        restored = manager.restore_session("u1", "s1", "s2")

        # Assert
        assert restored is not None
        assert restored.id == "s2"
        assert manager.get_session("s2") is restored
        assert restored.context.current_intent.type == IntentType.SKILL_GUIDANCE
        assert restored.context.active_topics == ["skills"]
        assert manager.has_pending_timer("s2")

    def test_restore_consumes_snapshot(self, manager):
        """Test that a snapshot can only be restored once."""
        # Arrange
        manager.create_session("u1", "s1")
        manager.end_session("s1")
        manager.restore_session("u1", "s1", "s2")

        # Act
        second = manager.restore_session("u1", "s1", "s3")

        # Assert
        assert second is None
        assert manager.get_preserved_state("s1") is None

    def test_restore_missing_snapshot(self, manager):
        """Test that restoring an unknown id returns None."""
        assert manager.restore_session("u1", "never", "s2") is None

    def test_restore_other_users_snapshot(self, manager):
        """Test that another user cannot claim a snapshot."""
        # Arrange
        manager.create_session("u1", "s1")
        manager.end_session("s1")

        # Act
        restored = manager.restore_session("intruder", "s1", "s2")

        # Assert
        assert restored is None
        assert manager.get_preserved_state("s1") is not None

    def test_snapshot_is_independent_of_live_session(self, manager):
        """Test that later changes do not leak into a preserved snapshot."""
        # Arrange
        manager.create_session("u1", "s1")
        manager.update_context("s1", messages=(user_message("first"),))
        manager.preserve_session_state("s1")

        # Act
        manager.update_context("s1", messages=(user_message("second"),))

        # Assert
        state = manager.get_preserved_state("s1")
        assert [m.content for m in state.context.conversation_history] == ["first"]

    def test_preserve_unknown_session(self, manager):
        """Test that preserving a session that is not live raises."""
        with pytest.raises(SessionNotFoundError):
            manager.preserve_session_state("missing")


class TestContextUpdates:
    """Test cases for update_context."""

    def test_appends_messages_and_dedupes_topics(self, manager, clock):
        """Test that messages accumulate and topics stay unique."""
        # Arrange
        manager.create_session("u1", "s1")
        clock.advance(10)

        # Act
        session = manager.update_context(
            "s1",
            messages=(user_message("a"), user_message("b")),
            active_topics=["skills", "career", "skills"],
        )

        # Assert
        assert [m.content for m in session.context.conversation_history] == ["a", "b"]
        assert session.context.active_topics == ["skills", "career"]
        assert session.last_activity == clock.now

    def test_update_context_of_expired_session(self, manager):
        """Test that a session that is no longer live cannot be updated."""
        # Arrange
        manager.create_session("u1", "s1")
        manager.end_session("s1")

        # Act & Assert
        with pytest.raises(SessionTimeoutError):
            manager.update_context("s1", messages=(user_message("late"),))


class TestTimeoutBoundaries:
    """Test cases for timeout and warning queries."""

    def test_not_timed_out_just_before_timeout(self, manager, clock):
        """Test that a session idle for timeout minus a moment is still live."""
        manager.create_session("u1", "s1")
        clock.advance(59.999)
        assert not manager.is_session_timed_out("s1")

    def test_timed_out_at_timeout(self, manager, clock):
        """Test that idle time equal to the timeout counts as timed out."""
        manager.create_session("u1", "s1")
        clock.advance(60)
        assert manager.is_session_timed_out("s1")

    def test_unknown_session_counts_as_timed_out(self, manager):
        """Test that unknown sessions are reported as timed out."""
        assert manager.is_session_timed_out("missing")

    def test_near_timeout_window(self, manager, clock):
        """Test that the warning window is [warning, timeout)."""
        manager.create_session("u1", "s1")

        clock.advance(49)
        assert not manager.is_session_near_timeout("s1")
        clock.advance(1)
        assert manager.is_session_near_timeout("s1")
        clock.advance(10)
        assert not manager.is_session_near_timeout("s1")

    def test_activity_resets_idle_time(self, manager, clock):
        """Test that activity restarts the idle period rather than extending it."""
        # Arrange
        manager.create_session("u1", "s1")
        clock.advance(55)

        # Act
        manager.update_activity("s1")
        clock.advance(55)

        # Assert
        assert not manager.is_session_timed_out("s1")
        assert manager.is_session_near_timeout("s1")

    def test_cleanup_expired_sessions(self, manager, clock):
        """Test that the sweep ends exactly the idle sessions."""
        # Arrange
        manager.create_session("u1", "old")
        clock.advance(30)
        manager.create_session("u2", "fresh")
        clock.advance(30)

        # Act
        removed = manager.cleanup_expired_sessions()

        # Assert
        assert removed == 1
        assert manager.get_session("old") is None
        assert manager.get_session("fresh") is not None
        assert manager.get_preserved_state("old") is not None


class TestQueries:
    """Test cases for session queries and statistics."""

    def test_get_user_sessions(self, manager):
        """Test that sessions are listed per user."""
        manager.create_session("u1", "s1")
        manager.create_session("u1", "s2")
        manager.create_session("u2", "s3")

        assert {s.id for s in manager.get_user_sessions("u1")} == {"s1", "s2"}

    def test_get_stats(self, manager, clock):
        """Test that statistics count live and preserved sessions."""
        # Arrange
        manager.create_session("u1", "s1")
        clock.advance(20)
        manager.create_session("u2", "s2")
        manager.end_session("s2")

        # Act
        stats = manager.get_stats()

        # Assert
        assert stats.active_sessions == 1
        assert stats.preserved_states == 1
        assert stats.oldest_session_age_seconds == 20

    def test_stats_when_empty(self, manager):
        """Test that the oldest age is None without sessions."""
        assert manager.get_stats().oldest_session_age_seconds is None

    def test_clear(self, manager):
        """Test that clear drops sessions, snapshots, and timers."""
        manager.create_session("u1", "s1")
        manager.create_session("u1", "s2")
        manager.end_session("s2")

        manager.clear()

        assert manager.get_session("s1") is None
        assert manager.get_preserved_state("s2") is None
        assert not manager.has_pending_timer("s1")


@pytest.mark.slow
class TestRealTimers:
    """Test cases that wait on real inactivity timers."""

    @pytest.fixture
    def fast_manager(self):
        manager = SessionManager(SessionConfig(timeout_seconds=0.3, warning_seconds=0.2))
        yield manager
        manager.shutdown()

    def test_timer_expires_idle_session(self, fast_manager):
        """Test that an idle session is ended and preserved by its timer."""
        # Arrange
        fast_manager.create_session("u1", "s1")

        # Act
        time.sleep(0.6)

        # Assert
        assert fast_manager.get_session("s1") is None
        assert fast_manager.get_preserved_state("s1") is not None
        assert not fast_manager.has_pending_timer("s1")

    def test_activity_postpones_expiry(self, fast_manager):
        """Test that a reset timer does not fire at the original deadline."""
        # Arrange
        fast_manager.create_session("u1", "s1")
        time.sleep(0.2)

        # Act
        fast_manager.update_activity("s1")
        time.sleep(0.2)

        # Assert
        assert fast_manager.get_session("s1") is not None

    def test_explicit_end_cancels_timer(self, fast_manager):
        """Test that a session ended early is preserved exactly once."""
        # Arrange
        fast_manager.create_session("u1", "s1")
        fast_manager.end_session("s1")
        restored = fast_manager.restore_session("u1", "s1", "s2")
        fast_manager.end_session("s2")

        # Act
        time.sleep(0.5)

        # Assert
        assert restored is not None
        assert fast_manager.get_preserved_state("s1") is None
        assert fast_manager.get_preserved_state("s2") is not None

    def test_concurrent_activity_and_expiry(self, fast_manager):
        """Test that racing resets never leave a live session without a timer."""
        # Arrange
        fast_manager.create_session("u1", "s1")
        errors: list[Exception] = []

        def touch():
            for _ in range(20):
                try:
                    fast_manager.update_activity("s1")
                except SessionTimeoutError as e:
                    errors.append(e)
                time.sleep(0.01)

        threads = [threading.Thread(target=touch) for _ in range(4)]

        # Act
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Assert
        assert errors == []
        assert fast_manager.get_session("s1") is not None
        assert fast_manager.has_pending_timer("s1")

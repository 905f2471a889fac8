"""
Session Lifecycle Manager

Tracks activity per session id, expires idle sessions, and keeps each ended
session's context recoverable exactly once.

Lifecycle:
    Active --update_activity--> Active (timer restarted, not extended)
    Active --timer fires / end_session--> Preserved (snapshot by session id)
    Preserved --restore_session--> Restored (new live session, snapshot consumed)
    Preserved --never reclaimed--> Discarded

Concurrency:
    Each live session owns at most one threading.Timer, tagged with a
    generation number. Every state transition, including a timer firing, runs
    under one re-entrant lock. A timer whose generation no longer matches the
    session's current generation was superseded by a reset or an explicit end
    and does nothing, so an expiry can never undo a concurrent reset or
    preserve a session twice.

Example Usage:
    manager = SessionManager(SessionConfig(timeout_seconds=1.0, warning_seconds=0.8))
    session = manager.create_session("u1", "s1")
    manager.update_activity("s1")
    manager.end_session("s1")
    restored = manager.restore_session("u1", "s1", "s2")
"""

import itertools
import threading
from datetime import datetime
from typing import Callable, Optional

import structlog
from pydantic import BaseModel

from ..models.config import SessionConfig
from ..models.core import ActionStep, Intent, Message, Session, SessionContext, utc_now
from ..utils.errors import SessionNotFoundError, SessionTimeoutError
from .repositories import (
    InMemoryPreservedStateRepository,
    InMemorySessionRepository,
    PreservedState,
    PreservedStateRepository,
    SessionRepository,
)

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


class SessionStats(BaseModel):
    active_sessions: int
    preserved_states: int
    oldest_session_age_seconds: Optional[float] = None


class SessionManager:
    """Manages session lifecycle with inactivity timeout and state preservation."""

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        session_repository: Optional[SessionRepository] = None,
        preserved_repository: Optional[PreservedStateRepository] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize SessionManager.

        Args:
            config: Timeout and warning thresholds (defaults: 30 / 25 minutes)
            session_repository: Store for live sessions (default: in-memory)
            preserved_repository: Store for preserved snapshots (default: in-memory)
            clock: Returns the current aware datetime; used for boundary
                queries and timestamps (default: UTC wall clock)
        """
        self.config = config or SessionConfig()
        self._sessions = session_repository or InMemorySessionRepository()
        self._preserved = preserved_repository or InMemoryPreservedStateRepository()
        self._clock = clock or utc_now
        self._lock = threading.RLock()
        self._timers: dict[str, tuple[int, threading.Timer]] = {}
        self._generations = itertools.count(1)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_session(self, user_id: str, session_id: str) -> Session:
        """Start a live session with a fresh context and inactivity timer."""
        now = self._clock()
        session = Session(
            id=session_id,
            user_id=user_id,
            start_time=now,
            last_activity=now,
            context=SessionContext(),
        )

        with self._lock:
            if self._sessions.get(session_id) is not None:
                logger.warning("session_replaced", session_id=session_id)
            self._sessions.put(session)
            self._schedule_timer(session_id)

        logger.info("session_created", session_id=session_id, user_id=user_id)
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        """Return the live session, or None. Preserved snapshots are never returned."""
        with self._lock:
            return self._sessions.get(session_id)

    def update_activity(self, session_id: str) -> None:
        """
        Refresh last activity and restart the inactivity timer.

        Raises:
            SessionTimeoutError: If the session is not live
        """
        with self._lock:
            session = self._require_live(session_id)
            session.last_activity = self._clock()
            self._schedule_timer(session_id)

    def update_context(
        self,
        session_id: str,
        *,
        messages: tuple[Message, ...] = (),
        intent: Optional[Intent] = None,
        active_topics: Optional[list[str]] = None,
        pending_actions: Optional[list[ActionStep]] = None,
    ) -> Session:
        """
        Apply conversation changes to a live session and count them as activity.

        Raises:
            SessionTimeoutError: If the session is not live
        """
        with self._lock:
            session = self._require_live(session_id)
            context = session.context
            context.conversation_history.extend(messages)
            if intent is not None:
                context.current_intent = intent
            if active_topics is not None:
                context.active_topics = list(dict.fromkeys(active_topics))
            if pending_actions is not None:
                context.pending_actions = list(pending_actions)
            session.last_activity = self._clock()
            self._schedule_timer(session_id)
            return session

    def preserve_session_state(self, session_id: str) -> None:
        """
        Snapshot a live session's context by value, keyed by its id.

        Raises:
            SessionNotFoundError: If the session is not live
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            self._preserve(session)

    def restore_session(
        self, user_id: str, old_session_id: str, new_session_id: str
    ) -> Optional[Session]:
        """
        Consume the snapshot for old_session_id into a new live session.

        Returns:
            The new session, or None if no snapshot exists for that id (or it
            belongs to another user)
        """
        with self._lock:
            state = self._preserved.peek(old_session_id)
            if state is None:
                logger.info(
                    "restore_snapshot_missing",
                    old_session_id=old_session_id,
                    user_id=user_id,
                )
                return None
            if state.user_id != user_id:
                logger.warning(
                    "restore_user_mismatch",
                    old_session_id=old_session_id,
                    user_id=user_id,
                )
                return None

            self._preserved.take(old_session_id)
            now = self._clock()
            session = Session(
                id=new_session_id,
                user_id=user_id,
                start_time=now,
                last_activity=now,
                context=state.context,
            )
            self._sessions.put(session)
            self._schedule_timer(new_session_id)

        logger.info(
            "session_restored",
            old_session_id=old_session_id,
            session_id=new_session_id,
            user_id=user_id,
        )
        return session

    def end_session(self, session_id: str) -> None:
        """
        Preserve, then remove the live session and cancel its timer.

        Raises:
            SessionNotFoundError: If the session is not live
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            self._end(session, reason="explicit")

    def cleanup_expired_sessions(self) -> int:
        """End every live session idle for at least the timeout; return how many."""
        with self._lock:
            now = self._clock()
            expired = [
                session
                for session in self._sessions.all()
                if self._elapsed(session, now) >= self.config.timeout_seconds
            ]
            for session in expired:
                self._end(session, reason="sweep")

        if expired:
            logger.info("expired_sessions_cleaned", count=len(expired))
        return len(expired)

    def clear(self) -> None:
        """Cancel all timers and drop every live session and snapshot."""
        with self._lock:
            for _, timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
            self._sessions.clear()
            self._preserved.clear()

    def shutdown(self) -> None:
        """Stop all inactivity timers; used when the process exits."""
        self.clear()
        logger.info("session_manager_shutdown")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_session_timed_out(self, session_id: str) -> bool:
        """True when idle time >= timeout; unknown sessions count as timed out."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return True
            return self._elapsed(session) >= self.config.timeout_seconds

    def is_session_near_timeout(self, session_id: str) -> bool:
        """True inside the warning window [warning, timeout); False for unknown ids."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            elapsed = self._elapsed(session)
            return self.config.warning_seconds <= elapsed < self.config.timeout_seconds

    def get_user_sessions(self, user_id: str) -> list[Session]:
        with self._lock:
            return [s for s in self._sessions.all() if s.user_id == user_id]

    def get_preserved_state(self, session_id: str) -> Optional[PreservedState]:
        with self._lock:
            return self._preserved.peek(session_id)

    def has_pending_timer(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._timers

    def get_stats(self) -> SessionStats:
        with self._lock:
            now = self._clock()
            sessions = self._sessions.all()
            oldest = max(
                ((now - s.start_time).total_seconds() for s in sessions),
                default=None,
            )
            return SessionStats(
                active_sessions=len(sessions),
                preserved_states=self._preserved.count(),
                oldest_session_age_seconds=oldest,
            )

    # ------------------------------------------------------------------
    # Internals (callers hold self._lock)
    # ------------------------------------------------------------------

    def _require_live(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionTimeoutError(session_id)
        return session

    def _elapsed(self, session: Session, now: Optional[datetime] = None) -> float:
        now = now or self._clock()
        return (now - session.last_activity).total_seconds()

    def _preserve(self, session: Session) -> None:
        self._preserved.put(
            PreservedState(
                session_id=session.id,
                user_id=session.user_id,
                context=session.context.snapshot(),
                preserved_at=self._clock(),
            )
        )
        logger.debug("session_state_preserved", session_id=session.id)

    def _end(self, session: Session, reason: str) -> None:
        self._preserve(session)
        self._cancel_timer(session.id)
        self._sessions.remove(session.id)
        logger.info(
            "session_ended",
            session_id=session.id,
            user_id=session.user_id,
            reason=reason,
        )

    def _schedule_timer(self, session_id: str) -> None:
        self._cancel_timer(session_id)
        generation = next(self._generations)
        timer = threading.Timer(
            self.config.timeout_seconds,
            self._on_timer_fired,
            args=(session_id, generation),
        )
        timer.daemon = True
        self._timers[session_id] = (generation, timer)
        timer.start()

    def _cancel_timer(self, session_id: str) -> None:
        entry = self._timers.pop(session_id, None)
        if entry is not None:
            entry[1].cancel()

    def _on_timer_fired(self, session_id: str, generation: int) -> None:
        with self._lock:
            entry = self._timers.get(session_id)
            if entry is None or entry[0] != generation:
                # Superseded by a reset, an explicit end, or a sweep
                return
            session = self._sessions.get(session_id)
            if session is None:
                self._timers.pop(session_id, None)
                return
            logger.info("session_timed_out", session_id=session_id)
            self._end(session, reason="timeout")

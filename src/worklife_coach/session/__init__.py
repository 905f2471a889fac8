"""Session lifecycle: live sessions, inactivity timers, preserved snapshots."""

from .repositories import (
    InMemoryPreservedStateRepository,
    InMemorySessionRepository,
    PreservedState,
    PreservedStateRepository,
    SessionRepository,
)
from .session_manager import SessionManager, SessionStats

__all__ = [
    "InMemoryPreservedStateRepository",
    "InMemorySessionRepository",
    "PreservedState",
    "PreservedStateRepository",
    "SessionManager",
    "SessionRepository",
    "SessionStats",
]

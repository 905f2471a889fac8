"""
Session Repositories

Keyed stores for live sessions and preserved context snapshots. The session
manager receives these by injection so another backend can replace the
in-memory dictionaries without touching lifecycle logic.

Implementations need not be thread-safe: the session manager serializes
every call under its own lock.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..models.core import Session, SessionContext, utc_now


class PreservedState(BaseModel):
    """Context snapshot retained after a session ends."""

    session_id: str
    user_id: str
    context: SessionContext
    preserved_at: datetime = Field(default_factory=utc_now)


class SessionRepository(ABC):
    @abstractmethod
    def get(self, session_id: str) -> Optional[Session]: ...

    @abstractmethod
    def put(self, session: Session) -> None: ...

    @abstractmethod
    def remove(self, session_id: str) -> Optional[Session]: ...

    @abstractmethod
    def all(self) -> list[Session]: ...

    @abstractmethod
    def clear(self) -> None: ...

    def count(self) -> int:
        return len(self.all())


class PreservedStateRepository(ABC):
    @abstractmethod
    def put(self, state: PreservedState) -> None: ...

    @abstractmethod
    def peek(self, session_id: str) -> Optional[PreservedState]: ...

    @abstractmethod
    def take(self, session_id: str) -> Optional[PreservedState]:
        """Remove and return the snapshot; later calls return None."""

    @abstractmethod
    def count(self) -> int: ...

    @abstractmethod
    def clear(self) -> None: ...


class InMemorySessionRepository(SessionRepository):
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def put(self, session: Session) -> None:
        self._sessions[session.id] = session

    def remove(self, session_id: str) -> Optional[Session]:
        return self._sessions.pop(session_id, None)

    def all(self) -> list[Session]:
        return list(self._sessions.values())

    def count(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        self._sessions.clear()


class InMemoryPreservedStateRepository(PreservedStateRepository):
    def __init__(self) -> None:
        self._states: dict[str, PreservedState] = {}

    def put(self, state: PreservedState) -> None:
        self._states[state.session_id] = state

    def peek(self, session_id: str) -> Optional[PreservedState]:
        return self._states.get(session_id)

    def take(self, session_id: str) -> Optional[PreservedState]:
        return self._states.pop(session_id, None)

    def count(self) -> int:
        return len(self._states)

    def clear(self) -> None:
        self._states.clear()

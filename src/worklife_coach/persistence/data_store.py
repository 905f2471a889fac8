"""
Data Store Contract

Abstract persistence interface consumed by the coaching orchestrator, plus an
in-memory implementation. Every operation may fail with a recoverable
(retryable) CoachError or a non-recoverable DataIntegrityError; callers wrap
calls with `with_retry` and must not assume success.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

import structlog
from pydantic import BaseModel, Field

from ..models.core import Message, UserProfile, utc_now
from ..utils.errors import ValidationError
from ..utils.validator import validate_data_integrity, validate_user_profile

logger = structlog.get_logger(__name__)


class ProgressEntry(BaseModel):
    """One line of a user's progress-history log."""

    user_id: str
    action_id: str
    completed_at: datetime = Field(default_factory=utc_now)
    milestone: Optional[str] = None


def require_key(value: Any, field: str) -> str:
    """Validate a user or session identifier."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a non-empty string", field=field, value=value)
    return value


class DataStore(ABC):
    """Persistence operations needed by the coaching core."""

    @abstractmethod
    async def save_user_profile(self, profile: UserProfile) -> None: ...

    @abstractmethod
    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]: ...

    @abstractmethod
    async def save_conversation(
        self, session_id: str, user_id: str, messages: list[Message]
    ) -> None:
        """Replace the stored message history for a session."""

    @abstractmethod
    async def get_session_messages(
        self, session_id: str, limit: Optional[int] = None
    ) -> list[Message]:
        """Messages of one session, most recent `limit` when given."""

    @abstractmethod
    async def get_conversation_history(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[Message]:
        """Messages across all of a user's sessions in time order."""

    @abstractmethod
    async def track_action_completion(
        self, user_id: str, action_id: str, milestone: Optional[str] = None
    ) -> ProgressEntry:
        """
        Append to the progress log and mark the action completed on the profile.

        Repeating an action id leaves the profile's completed set unchanged.
        """

    @abstractmethod
    async def get_progress_history(self, user_id: str) -> list[ProgressEntry]: ...


def _tail(messages: list[Message], limit: Optional[int]) -> list[Message]:
    if limit is None:
        return messages
    if limit <= 0:
        return []
    return messages[-limit:]


class InMemoryDataStore(DataStore):
    """
    Dictionary-backed store.

    Profiles are held as serialized records and checked for structural
    integrity on every read and write, so callers never share mutable state
    with the store.
    """

    def __init__(self) -> None:
        self._profiles: dict[str, dict[str, Any]] = {}
        self._conversations: dict[str, list[Message]] = {}
        self._session_owners: dict[str, str] = {}
        self._progress: dict[str, list[ProgressEntry]] = {}

    async def save_user_profile(self, profile: UserProfile) -> None:
        profile = validate_user_profile(profile)
        record = profile.model_dump(mode="json")
        validate_data_integrity(record)
        self._profiles[profile.user_id] = record
        logger.debug("profile_saved", user_id=profile.user_id)

    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        require_key(user_id, "user_id")
        record = self._profiles.get(user_id)
        if record is None:
            return None
        validate_data_integrity(record)
        return UserProfile.model_validate(record)

    async def save_conversation(
        self, session_id: str, user_id: str, messages: list[Message]
    ) -> None:
        require_key(session_id, "session_id")
        require_key(user_id, "user_id")
        self._conversations[session_id] = [m.model_copy(deep=True) for m in messages]
        self._session_owners[session_id] = user_id

    async def get_session_messages(
        self, session_id: str, limit: Optional[int] = None
    ) -> list[Message]:
        require_key(session_id, "session_id")
        messages = self._conversations.get(session_id, [])
        return [m.model_copy(deep=True) for m in _tail(messages, limit)]

    async def get_conversation_history(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[Message]:
        require_key(user_id, "user_id")
        messages = [
            message
            for session_id, owner in self._session_owners.items()
            if owner == user_id
            for message in self._conversations.get(session_id, [])
        ]
        messages.sort(key=lambda m: m.timestamp)
        return [m.model_copy(deep=True) for m in _tail(messages, limit)]

    async def track_action_completion(
        self, user_id: str, action_id: str, milestone: Optional[str] = None
    ) -> ProgressEntry:
        require_key(user_id, "user_id")
        require_key(action_id, "action_id")

        entry = ProgressEntry(user_id=user_id, action_id=action_id, milestone=milestone)
        self._progress.setdefault(user_id, []).append(entry)

        profile = await self.get_user_profile(user_id)
        if profile is not None and profile.add_completed_action(action_id):
            await self.save_user_profile(profile)

        logger.info("action_completed", user_id=user_id, action_id=action_id)
        return entry.model_copy()

    async def get_progress_history(self, user_id: str) -> list[ProgressEntry]:
        require_key(user_id, "user_id")
        return [e.model_copy() for e in self._progress.get(user_id, [])]

    def clear(self) -> None:
        self._profiles.clear()
        self._conversations.clear()
        self._session_owners.clear()
        self._progress.clear()

"""
File-backed Data Store

Persists profiles as JSON documents and conversations / progress logs as
JSONL files under a root directory:

    <root>/profiles/<user_id>.json
    <root>/conversations/<user_id>/<session_id>.jsonl
    <root>/progress/<user_id>.jsonl

Example Usage:
    store = FileDataStore("data")
    await store.save_user_profile(profile)
    history = await store.get_conversation_history("u1", limit=10)
"""

import asyncio
import json
import re
from pathlib import Path
from typing import Any, Optional, Type, TypeVar

import jsonlines
import pydantic
import structlog

from ..models.core import Message, UserProfile
from ..utils.errors import DatabaseUnavailableError, DataIntegrityError, ValidationError
from ..utils.validator import validate_data_integrity, validate_user_profile
from .data_store import DataStore, ProgressEntry, _tail, require_key

logger = structlog.get_logger(__name__)

SAFE_KEY = re.compile(r"^[A-Za-z0-9_.@-]+$")

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def _file_key(value: Any, field: str) -> str:
    key = require_key(value, field)
    if not SAFE_KEY.match(key) or key in (".", ".."):
        raise ValidationError(
            f"{field} contains characters not allowed in file names",
            field=field,
            value=value,
        )
    return key


def _load(model_cls: Type[ModelT], row: Any, source: str) -> ModelT:
    try:
        return model_cls.model_validate(row)
    except pydantic.ValidationError as e:
        raise DataIntegrityError(
            f"Corrupted record {source}: {e.error_count()} invalid field(s)",
            context={"fields": [".".join(str(p) for p in err["loc"]) for err in e.errors()]},
        ) from e


class FileDataStore(DataStore):
    """DataStore persisting to JSON and JSONL files."""

    def __init__(self, root_dir: str | Path = "data"):
        """
        Initialize FileDataStore.

        Args:
            root_dir: Directory for profile, conversation, and progress files
        """
        self.root_dir = Path(root_dir)
        self.profiles_dir = self.root_dir / "profiles"
        self.conversations_dir = self.root_dir / "conversations"
        self.progress_dir = self.root_dir / "progress"
        for directory in (self.profiles_dir, self.conversations_dir, self.progress_dir):
            directory.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def save_user_profile(self, profile: UserProfile) -> None:
        profile = validate_user_profile(profile)
        key = _file_key(profile.user_id, "user_id")
        record = profile.model_dump(mode="json")
        validate_data_integrity(record)
        await asyncio.to_thread(self._write_json, self.profiles_dir / f"{key}.json", record)
        logger.debug("profile_saved", user_id=key)

    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        key = _file_key(user_id, "user_id")
        path = self.profiles_dir / f"{key}.json"
        record = await asyncio.to_thread(self._read_json, path)
        if record is None:
            return None
        validate_data_integrity(record)
        return _load(UserProfile, record, path.name)

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    async def save_conversation(
        self, session_id: str, user_id: str, messages: list[Message]
    ) -> None:
        session_key = _file_key(session_id, "session_id")
        user_key = _file_key(user_id, "user_id")
        path = self.conversations_dir / user_key / f"{session_key}.jsonl"
        rows = [m.model_dump(mode="json") for m in messages]
        await asyncio.to_thread(self._write_lines, path, rows)

    async def get_session_messages(
        self, session_id: str, limit: Optional[int] = None
    ) -> list[Message]:
        session_key = _file_key(session_id, "session_id")
        paths = sorted(self.conversations_dir.glob(f"*/{session_key}.jsonl"))
        messages: list[Message] = []
        for path in paths:
            messages.extend(await asyncio.to_thread(self._read_messages, path))
        return _tail(messages, limit)

    async def get_conversation_history(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[Message]:
        user_key = _file_key(user_id, "user_id")
        messages: list[Message] = []
        for path in sorted((self.conversations_dir / user_key).glob("*.jsonl")):
            messages.extend(await asyncio.to_thread(self._read_messages, path))
        messages.sort(key=lambda m: m.timestamp)
        return _tail(messages, limit)

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    async def track_action_completion(
        self, user_id: str, action_id: str, milestone: Optional[str] = None
    ) -> ProgressEntry:
        user_key = _file_key(user_id, "user_id")
        require_key(action_id, "action_id")

        entry = ProgressEntry(user_id=user_key, action_id=action_id, milestone=milestone)
        await asyncio.to_thread(
            self._append_line,
            self.progress_dir / f"{user_key}.jsonl",
            entry.model_dump(mode="json"),
        )

        profile = await self.get_user_profile(user_key)
        if profile is not None and profile.add_completed_action(action_id):
            await self.save_user_profile(profile)

        logger.info("action_completed", user_id=user_key, action_id=action_id)
        return entry

    async def get_progress_history(self, user_id: str) -> list[ProgressEntry]:
        user_key = _file_key(user_id, "user_id")
        rows = await asyncio.to_thread(
            self._read_lines, self.progress_dir / f"{user_key}.jsonl"
        )
        return [_load(ProgressEntry, row, f"{user_key}.jsonl") for row in rows]

    # ------------------------------------------------------------------
    # File helpers (run in worker threads)
    # ------------------------------------------------------------------

    @staticmethod
    def _write_json(path: Path, record: dict) -> None:
        tmp_path = path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2)
            tmp_path.replace(path)
        except OSError as e:
            raise DatabaseUnavailableError(f"write {path.name}", str(e)) from e

    @staticmethod
    def _read_json(path: Path) -> Optional[dict]:
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DataIntegrityError(f"Corrupted record {path.name}: {e}") from e
        except OSError as e:
            raise DatabaseUnavailableError(f"read {path.name}", str(e)) from e

    @staticmethod
    def _write_lines(path: Path, rows: list[dict]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with jsonlines.open(path, mode="w") as writer:
                writer.write_all(rows)
        except OSError as e:
            raise DatabaseUnavailableError(f"write {path.name}", str(e)) from e

    @staticmethod
    def _append_line(path: Path, row: dict) -> None:
        try:
            with jsonlines.open(path, mode="a") as writer:
                writer.write(row)
        except OSError as e:
            raise DatabaseUnavailableError(f"append {path.name}", str(e)) from e

    @staticmethod
    def _read_lines(path: Path) -> list[dict]:
        if not path.exists():
            return []
        try:
            with jsonlines.open(path) as reader:
                return list(reader)
        except (jsonlines.InvalidLineError, UnicodeDecodeError) as e:
            raise DataIntegrityError(f"Corrupted log {path.name}: {e}") from e
        except OSError as e:
            raise DatabaseUnavailableError(f"read {path.name}", str(e)) from e

    @classmethod
    def _read_messages(cls, path: Path) -> list[Message]:
        return [_load(Message, row, path.name) for row in cls._read_lines(path)]

"""
Coaching Orchestrator

Entry point of the coaching core. For each inbound message it resolves the
session, classifies the intent, loads the profile, dispatches to the profile
analyzer and recommendation engine, composes the response, and persists the
turn.

Guarantees:
    - Requests on the same session are serialized by a per-session
      asyncio.Lock, taken on the id an old session was restored into;
      different sessions proceed concurrently.
    - Profile updates and action completions of one user never interleave.
    - Data store calls go through `with_retry`; when they still fail, or when
      analysis fails, the caller receives a valid response built around a
      context-specific fallback message. Errors never reach the caller.
    - Mindset support leads the response whenever the message shows
      emotional struggle, whatever the topical intent.
    - Every response contains something actionable.

Example Usage:
    orchestrator = CoachingOrchestrator(InMemoryDataStore())
    response = await orchestrator.process_request(
        CoachingRequest(user_id="u1", message="What skills should I learn?")
    )
    await orchestrator.end_session(response.session_id)
"""

import asyncio
import uuid
from contextlib import AsyncExitStack, asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Awaitable, Callable, Optional, TypeVar

from pydantic import BaseModel, Field
from structlog.types import BindableLogger

from .conversation.coach_behavior import FIRST_TIME_GREETING, mindset_support_text
from .conversation.formatter import ResponseFormatter
from .intent.classifier import (
    IntentClassifier,
    emotional_content_of,
    has_emotional_struggle,
    should_prioritize_mindset,
)
from .models.config import CoachParams
from .models.core import (
    ActionStep,
    CareerPath,
    Intent,
    IntentType,
    Message,
    MessageSender,
    Session,
    Timeframe,
    UserProfile,
    utc_now,
)
from .models.recommendations import GrowthPlan, Recommendations
from .persistence.data_store import DataStore, ProgressEntry
from .profile.analyzer import ProfileAnalyzer
from .profile.collector import collect_profile_data, merge_entities, record_struggle
from .recommendations.engine import RecommendationEngine
from .session.session_manager import SessionManager
from .utils.errors import (
    SessionNotFoundError,
    SessionTimeoutError,
    get_fallback_response,
    with_retry,
)
from .utils.logger import get_logger

T = TypeVar("T")

IN_ROLE_PHRASES = ("current role", "current job", "where i am")
TIMEFRAME_VALUES = {t.value for t in Timeframe}

FALLBACK_CONTEXTS = {
    IntentType.CAREER_CLARITY: "career_path",
    IntentType.SKILL_GUIDANCE: "skill_recommendation",
    IntentType.ACTION_PLANNING: "action_steps",
    IntentType.PROGRESS_CHECK: "action_steps",
    IntentType.MINDSET_SUPPORT: "action_steps",
    IntentType.PROFILE_BUILDING: "profile_analysis",
}

RETURNING_USER_GREETING = (
    "Welcome back! Based on our previous conversations, let's pick up where we left off."
)

# Stored system messages shorter than this are not worth referring back to
MIN_REFERENCE_LENGTH = 50


class CoachingRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    message: str
    session_id: Optional[str] = None


class CoachingResponse(BaseModel):
    content: str
    session_id: str
    intent: Intent
    recommendations: Optional[Recommendations] = None
    timestamp: datetime = Field(default_factory=utc_now)


class _StoreFailure(Exception):
    """A data store call that still failed after retries."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class KeyedLocks:
    """asyncio locks created on demand and dropped once nobody holds or awaits them."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, key: str) -> bool:
        return key in self._locks

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


def new_session_id() -> str:
    return f"session-{uuid.uuid4().hex[:12]}"


def new_message_id() -> str:
    return f"msg-{uuid.uuid4().hex[:12]}"


def fallback_context(intent_type: IntentType) -> str:
    return FALLBACK_CONTEXTS.get(intent_type, "default")


class CoachingOrchestrator:
    """Routes messages through the coaching core and assembles responses."""

    def __init__(
        self,
        data_store: DataStore,
        session_manager: Optional[SessionManager] = None,
        params: Optional[CoachParams] = None,
        classifier: Optional[IntentClassifier] = None,
        engine: Optional[RecommendationEngine] = None,
        analyzer: Optional[ProfileAnalyzer] = None,
        formatter: Optional[ResponseFormatter] = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            data_store: Persistence backend (the only component doing I/O)
            session_manager: Session lifecycle (default: built from params.session)
            params: Coach parameters (default: CoachParams())
            classifier: Intent classifier (default: rule-based IntentClassifier)
            engine: Recommendation engine (default: built from params.coaching)
            analyzer: Profile analyzer shared with the default engine
            formatter: Response formatter (default: package templates)
        """
        self.params = params or CoachParams()
        self.data_store = data_store
        self.session_manager = session_manager or SessionManager(self.params.session)
        self.analyzer = analyzer or ProfileAnalyzer()
        self.classifier = classifier or IntentClassifier()
        self.engine = engine or RecommendationEngine(self.params.coaching, self.analyzer)
        self.formatter = formatter or ResponseFormatter()

        self._session_locks = KeyedLocks()
        # Profile read-modify-write spans awaits; one writer per user
        self._user_locks = KeyedLocks()
        # Old session id -> the session it was restored into
        self._restored_into: dict[str, str] = {}
        self._growth_plans: dict[str, GrowthPlan] = {}

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def process_request(self, request: CoachingRequest) -> CoachingResponse:
        """
        Handle one user message.

        Returns:
            CoachingResponse carrying the live session id; never raises for
            data store or analysis failures
        """
        requested_id = request.session_id or new_session_id()
        log = get_logger(session_id=requested_id, component="coaching_orchestrator").bind(
            user_id=request.user_id
        )

        self._prune_inactive()
        async with AsyncExitStack() as held:
            locked_id = await held.enter_async_context(self._session_turn(requested_id))
            session = self._resolve_session(request.user_id, request.session_id, requested_id, log)
            if session.id != locked_id:
                # Restored or replaced; later requests on the alias queue behind this turn
                await held.enter_async_context(self._session_locks.hold(session.id))
            log = log.bind(session_id=session.id)
            intent = self.classifier.classify(request.message)
            log.info(
                "request_received",
                intent=intent.type.value,
                confidence=intent.confidence,
                message_text=request.message,
            )

            try:
                async with self._user_locks.hold(request.user_id):
                    content, recommendations = await self._respond(session, request, intent, log)
            except Exception as e:
                log.exception("request_failed", error=str(e))
                content = get_fallback_response(fallback_context(intent.type))
                recommendations = None

            session = self._record_turn(session, request, intent, content, recommendations, log)
            await self._persist_conversation(session, log)

        log.info(
            "request_processed",
            intent=intent.type.value,
            has_recommendations=recommendations is not None,
        )
        return CoachingResponse(
            content=content,
            session_id=session.id,
            intent=intent,
            recommendations=recommendations,
        )

    async def complete_action(
        self, user_id: str, action_id: str, milestone: Optional[str] = None
    ) -> Optional[ProgressEntry]:
        """
        Mark an action completed for the user.

        Returns:
            The progress log entry, or None when the data store failed
        """
        log = get_logger(component="coaching_orchestrator").bind(user_id=user_id)
        try:
            async with self._user_locks.hold(user_id):
                entry = await self._store(
                    "track_action_completion",
                    lambda: self.data_store.track_action_completion(user_id, action_id, milestone),
                )
        except _StoreFailure as e:
            log.error("action_completion_failed", action_id=action_id, error=str(e.cause))
            return None
        log.info("action_completed", action_id=action_id, milestone=milestone)
        return entry

    async def end_session(self, session_id: str) -> bool:
        """
        Persist the conversation and end the session.

        Returns:
            True if a live session was ended, False for unknown or expired ids
        """
        log = get_logger(session_id=session_id, component="coaching_orchestrator")
        async with self._session_turn(session_id):
            session = self.session_manager.get_session(session_id)
            if session is None:
                log.warning("end_unknown_session")
                return False
            await self._persist_conversation(session, log)
            try:
                self.session_manager.end_session(session_id)
            except SessionNotFoundError:
                # Expired while the conversation was being saved
                log.info("session_expired_before_end")
                return False

        self._prune_inactive()
        log.info("coaching_session_ended", messages=len(session.context.conversation_history))
        return True

    def get_growth_plan(self, user_id: str) -> Optional[GrowthPlan]:
        return self._growth_plans.get(user_id)

    def cleanup_expired_sessions(self) -> int:
        """End idle sessions and drop the per-session state kept for them."""
        count = self.session_manager.cleanup_expired_sessions()
        self._prune_inactive()
        return count

    # ------------------------------------------------------------------
    # Session handling
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _session_turn(self, session_id: str) -> AsyncIterator[str]:
        """Hold the lock of the session the id currently resolves to; yields that id."""
        while True:
            current = self._latest_session_id(session_id)
            async with self._session_locks.hold(current):
                # A restore may have moved the alias while we waited
                if self._latest_session_id(session_id) == current:
                    yield current
                    return

    def _prune_inactive(self) -> None:
        """Drop aliases to sessions that are no longer live and plans of users without one."""
        dead_aliases = [
            old_id
            for old_id in self._restored_into
            if self.session_manager.get_session(self._latest_session_id(old_id)) is None
        ]
        for old_id in dead_aliases:
            del self._restored_into[old_id]

        idle_users = [
            user_id
            for user_id in self._growth_plans
            if not self.session_manager.get_user_sessions(user_id)
        ]
        for user_id in idle_users:
            del self._growth_plans[user_id]

        if dead_aliases or idle_users:
            get_logger(component="coaching_orchestrator").debug(
                "orchestrator_state_pruned",
                aliases=len(dead_aliases),
                growth_plans=len(idle_users),
            )

    def _latest_session_id(self, session_id: str) -> str:
        seen = {session_id}
        while session_id in self._restored_into:
            session_id = self._restored_into[session_id]
            if session_id in seen:
                break
            seen.add(session_id)
        return session_id

    def _resolve_session(
        self,
        user_id: str,
        session_id: Optional[str],
        fresh_id: str,
        log: BindableLogger,
    ) -> Session:
        """Live session for the id, else one restored from its snapshot, else a new one."""
        if session_id:
            current_id = self._latest_session_id(session_id)
            session = self.session_manager.get_session(current_id)
            if session is not None and session.user_id == user_id:
                try:
                    self.session_manager.update_activity(current_id)
                    return session
                except SessionTimeoutError:
                    # Timer fired between lookup and refresh
                    session = None
            if session is not None:
                log.warning("session_user_mismatch", requested_session=session_id)
            else:
                restored = self._restore(user_id, current_id, log)
                if restored is not None:
                    self._restored_into[session_id] = restored.id
                    return restored
            fresh_id = new_session_id()

        return self.session_manager.create_session(user_id, fresh_id)

    def _restore(self, user_id: str, old_id: str, log: BindableLogger) -> Optional[Session]:
        restored = self.session_manager.restore_session(user_id, old_id, new_session_id())
        if restored is not None:
            self._restored_into[old_id] = restored.id
            log.info("session_resumed", old_session_id=old_id, new_session_id=restored.id)
        return restored

    def _record_turn(
        self,
        session: Session,
        request: CoachingRequest,
        intent: Intent,
        content: str,
        recommendations: Optional[Recommendations],
        log: BindableLogger,
    ) -> Session:
        """Append the exchange to the session context; survives a timeout mid-request."""
        messages = (
            Message(id=new_message_id(), sender=MessageSender.USER, content=request.message),
            Message(id=new_message_id(), sender=MessageSender.SYSTEM, content=content),
        )
        topics = [*session.context.active_topics, intent.type.value]
        topics.extend(intent.entities.get("career_fields", []))
        pending = recommendations.actions if recommendations and recommendations.actions else None

        def apply(target: Session) -> Session:
            return self.session_manager.update_context(
                target.id,
                messages=messages,
                intent=intent,
                active_topics=topics,
                pending_actions=pending,
            )

        try:
            return apply(session)
        except SessionTimeoutError:
            log.warning("session_expired_during_request")
            replacement = self._restore(session.user_id, session.id, log)
            if replacement is None:
                replacement = self.session_manager.create_session(session.user_id, new_session_id())
            return apply(replacement)

    # ------------------------------------------------------------------
    # Response composition
    # ------------------------------------------------------------------

    async def _respond(
        self,
        session: Session,
        request: CoachingRequest,
        intent: Intent,
        log: BindableLogger,
    ) -> tuple[str, Optional[Recommendations]]:
        prioritize_mindset = should_prioritize_mindset(intent, request.message)
        mindset_text = (
            mindset_support_text(emotional_content_of(intent), request.message)
            if prioritize_mindset
            else None
        )

        try:
            stored = await self._store(
                "get_user_profile", lambda: self.data_store.get_user_profile(request.user_id)
            )
        except _StoreFailure as e:
            log.error("profile_load_failed", error=str(e.cause))
            fallback = get_fallback_response(fallback_context(intent.type))
            return "\n\n".join(t for t in (mindset_text, fallback) if t), None

        if stored is None:
            log.info("profile_missing_using_default")
        profile = stored or collect_profile_data(request.user_id)
        profile = self._update_profile(profile, intent, request.message)

        try:
            recommendations = self._route(intent, request.message, profile, session)
        except Exception as e:
            log.exception("recommendation_failed", intent=intent.type.value, error=str(e))
            fallback = get_fallback_response(fallback_context(intent.type))
            return "\n\n".join(t for t in (mindset_text, fallback) if t), None

        opening = await self._opening(session, stored, log)
        acknowledgment = self._progress_acknowledgment(intent, session, profile)
        formatted = self.formatter.format_combined(
            recommendations,
            intent.type,
            mindset_text=mindset_text,
            acknowledgment=" ".join(t for t in (opening, acknowledgment) if t) or None,
            profile=profile,
        )

        if stored is None or profile != stored:
            try:
                await self._store(
                    "save_user_profile", lambda: self.data_store.save_user_profile(profile)
                )
            except _StoreFailure as e:
                log.error("profile_save_failed", error=str(e.cause))

        return formatted.content, None if recommendations.is_empty() else recommendations

    def _update_profile(self, profile: UserProfile, intent: Intent, message: str) -> UserProfile:
        """Fold message facts into the profile and note any stated struggle."""
        updated = merge_entities(profile, intent.entities)
        if has_emotional_struggle(message):
            emotional = emotional_content_of(intent)
            severity = round(emotional.severity * 10) if emotional else 5
            updated = record_struggle(updated, message, severity=severity)
        return updated

    def _route(
        self, intent: Intent, message: str, profile: UserProfile, session: Session
    ) -> Recommendations:
        """Produce the recommendations that answer this intent."""
        recommendations = Recommendations()
        intent_type = intent.type

        if intent_type == IntentType.CAREER_CLARITY:
            recommendations.career_paths = self.engine.generate_career_paths(profile)
        elif intent_type == IntentType.SKILL_GUIDANCE:
            recommendations.skills = self.engine.recommend_skills(
                profile, self._target_path(profile)
            )
        elif intent_type in (IntentType.ACTION_PLANNING, IntentType.PROGRESS_CHECK):
            recommendations.actions = self._action_steps(intent, profile)
        elif intent_type == IntentType.GROWTH_PLANNING:
            recommendations.growth_plan = self._growth_plan(profile)
        elif intent_type == IntentType.TRANSITION_GUIDANCE:
            source, target = self._transition_fields(intent, profile)
            recommendations.transition_plan = self.engine.provide_transition_guidance(
                source, target, profile
            )
        elif intent_type == IntentType.MINDSET_SUPPORT:
            recommendations.actions = self.engine.mindset_steps()
        else:
            recommendations.actions = self.engine.profile_building_steps(profile)

        lowered = message.lower()
        if any(phrase in lowered for phrase in IN_ROLE_PHRASES):
            recommendations.in_role_growth = self.engine.analyze_in_role_growth(profile)

        return recommendations

    def _target_path(self, profile: UserProfile) -> CareerPath:
        if profile.career_info.current_path is not None:
            return profile.career_info.current_path
        return self.engine.generate_career_paths(profile)[0]

    def _action_steps(self, intent: Intent, profile: UserProfile) -> list[ActionStep]:
        career_path = profile.career_info.current_path
        skills = self.engine.recommend_skills(profile, career_path) if career_path else None
        timeframe = intent.entities.get("timeframe")
        return self.engine.create_action_steps(
            timeframe=Timeframe(timeframe) if timeframe in TIMEFRAME_VALUES else None,
            profile=profile,
            career_path=career_path,
            skill_recommendations=skills,
        )

    def _growth_plan(self, profile: UserProfile) -> GrowthPlan:
        """Adapt the user's plan for the same path, or build a new one."""
        career_path = self._target_path(profile)
        existing = self._growth_plans.get(profile.user_id)
        if existing is not None and existing.career_path.id == career_path.id:
            plan = self.engine.adapt_growth_plan(existing, profile)
        else:
            plan = self.engine.build_growth_plan(profile, career_path)
        self._growth_plans[profile.user_id] = plan
        return plan

    @staticmethod
    def _transition_fields(intent: Intent, profile: UserProfile) -> tuple[Optional[str], str]:
        """Two mentioned fields read as source then target; one is the target."""
        fields = intent.entities.get("career_fields", [])
        if len(fields) >= 2:
            return fields[0], fields[1]
        if fields:
            return None, fields[0]
        if profile.career_info.interests:
            return None, profile.career_info.interests[0]
        return None, "a new field"

    def _progress_acknowledgment(
        self, intent: Intent, session: Session, profile: UserProfile
    ) -> Optional[str]:
        if intent.type != IntentType.PROGRESS_CHECK:
            return None
        done = set(profile.progress.completed_actions)
        completed = [a for a in session.context.pending_actions if a.id in done]
        return self.engine.generate_progress_acknowledgment(completed, profile) or None

    async def _opening(
        self, session: Session, stored: Optional[UserProfile], log: BindableLogger
    ) -> Optional[str]:
        """Greeting for the first turn of a session: new users or returning ones."""
        if session.context.conversation_history:
            return None
        if stored is None:
            return FIRST_TIME_GREETING
        try:
            history = await self._store(
                "get_conversation_history",
                lambda: self.data_store.get_conversation_history(
                    session.user_id, limit=self.params.coaching.history_limit
                ),
            )
        except _StoreFailure as e:
            log.warning("history_load_failed", error=str(e.cause))
            return None
        if any(
            m.sender == MessageSender.SYSTEM and len(m.content) > MIN_REFERENCE_LENGTH
            for m in history
        ):
            return RETURNING_USER_GREETING
        return None

    # ------------------------------------------------------------------
    # Data store access
    # ------------------------------------------------------------------

    async def _store(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        """Run a data store call with retry; failures surface as _StoreFailure."""
        try:
            return await with_retry(call, self.params.retry)
        except Exception as e:
            raise _StoreFailure(operation, e) from e

    async def _persist_conversation(self, session: Session, log: BindableLogger) -> None:
        history = list(session.context.conversation_history)
        try:
            await self._store(
                "save_conversation",
                lambda: self.data_store.save_conversation(session.id, session.user_id, history),
            )
        except _StoreFailure as e:
            log.error("conversation_save_failed", error=str(e.cause))

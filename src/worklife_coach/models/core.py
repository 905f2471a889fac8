"""
Core Coaching Models

Pydantic models for user profiles, goals, skills, sessions, and the
conversation context carried between turns.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ChallengeType(str, Enum):
    """Career struggle categories."""

    DIRECTION = "direction"
    SKILLS = "skills"
    CONFIDENCE = "confidence"
    OVERWHELM = "overwhelm"
    TRANSITION = "transition"
    STAGNATION = "stagnation"


class IntentType(str, Enum):
    """Classified purpose of a user message."""

    PROFILE_BUILDING = "profile_building"
    CAREER_CLARITY = "career_clarity"
    SKILL_GUIDANCE = "skill_guidance"
    ACTION_PLANNING = "action_planning"
    MINDSET_SUPPORT = "mindset_support"
    GROWTH_PLANNING = "growth_planning"
    TRANSITION_GUIDANCE = "transition_guidance"
    PROGRESS_CHECK = "progress_check"


class GoalType(str, Enum):
    SHORT_TERM = "short_term"
    LONG_TERM = "long_term"


class Timeframe(str, Enum):
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"


class ActionCategory(str, Enum):
    LEARNING = "learning"
    NETWORKING = "networking"
    APPLICATION = "application"
    REFLECTION = "reflection"


class MessageSender(str, Enum):
    USER = "user"
    SYSTEM = "system"


class Goal(BaseModel):
    """A short- or long-term career goal."""

    id: str = Field(..., min_length=1, description="Goal identifier")
    description: str = Field(..., min_length=1, description="What the user wants")
    type: GoalType = Field(default=GoalType.SHORT_TERM)
    priority: int = Field(default=1, ge=0, description="Higher is more important")
    target_date: Optional[datetime] = Field(None, description="Optional deadline")


class Challenge(BaseModel):
    """A categorized career struggle with severity 0-10."""

    model_config = ConfigDict(validate_assignment=True)

    type: ChallengeType
    description: str = Field(..., min_length=1)
    severity: int = Field(default=5, ge=0, le=10)


class Skill(BaseModel):
    """A named skill with proficiency level 0-10."""

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(..., min_length=1)
    level: int = Field(default=0, ge=0, le=10)
    category: str = Field(default="general", min_length=1)


class Milestone(BaseModel):
    """A dated checkpoint on the way to a goal."""

    id: str
    title: str
    description: str = ""
    target_date: datetime
    completed: bool = False
    completed_date: Optional[datetime] = None


class ActionStep(BaseModel):
    """A concrete next step with a timeframe and category."""

    id: str
    description: str = Field(..., min_length=1)
    timeframe: Timeframe
    category: ActionCategory
    completed: bool = False
    due_date: Optional[datetime] = None
    goal_id: Optional[str] = Field(None, description="Goal this step serves")
    objective_id: Optional[str] = Field(
        None, description="Growth plan objective this step advances"
    )


class CareerPath(BaseModel):
    """A candidate career direction scored against a profile."""

    id: str
    title: str
    description: str
    reasoning: str = Field(..., min_length=1)
    fit_score: float = Field(..., ge=0.0, le=1.0)
    required_skills: list[str] = Field(default_factory=list)
    time_to_transition: str
    growth_potential: float = Field(..., ge=0.0, le=1.0)
    trade_offs: list[str] = Field(
        default_factory=list, description="Relative strengths versus other paths"
    )


class PersonalInfo(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    age: int = Field(default=0, ge=0, le=120)
    current_role: Optional[str] = None
    years_of_experience: float = Field(default=0, ge=0, le=60)
    education: str = ""
    industry: Optional[str] = None


class CareerInfo(BaseModel):
    current_path: Optional[CareerPath] = None
    goals: list[Goal] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    struggles: list[Challenge] = Field(default_factory=list)


class SkillSet(BaseModel):
    current: list[Skill] = Field(default_factory=list)
    learning: list[Skill] = Field(default_factory=list)
    target: list[Skill] = Field(default_factory=list)


class Mindset(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    confidence_level: float = Field(default=0.5, ge=0.0, le=1.0)
    motivation_level: float = Field(default=0.5, ge=0.0, le=1.0)
    primary_concerns: list[str] = Field(default_factory=list)


class Progress(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    completed_actions: list[str] = Field(
        default_factory=list, description="Completed action ids, no duplicates"
    )
    milestones: list[Milestone] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utc_now)

    @field_validator("completed_actions")
    @classmethod
    def dedupe_completed_actions(cls, v: list[str]) -> list[str]:
        """Keep completed actions a set while preserving completion order."""
        return list(dict.fromkeys(v))


class UserProfile(BaseModel):
    """Everything the coach knows about a user."""

    user_id: str = Field(..., min_length=1)
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    career_info: CareerInfo = Field(default_factory=CareerInfo)
    skills: SkillSet = Field(default_factory=SkillSet)
    mindset: Mindset = Field(default_factory=Mindset)
    progress: Progress = Field(default_factory=Progress)

    def add_completed_action(self, action_id: str) -> bool:
        """Record an action as completed.

        Returns:
            True if the action was newly added, False if already completed
        """
        if action_id in self.progress.completed_actions:
            return False
        self.progress.completed_actions = [
            *self.progress.completed_actions,
            action_id,
        ]
        self.progress.last_updated = utc_now()
        return True


class Message(BaseModel):
    id: str
    sender: MessageSender
    content: str
    timestamp: datetime = Field(default_factory=utc_now)


class Intent(BaseModel):
    """Classified intent with confidence and extracted entities."""

    type: IntentType
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    entities: dict[str, Any] = Field(default_factory=dict)


class SessionContext(BaseModel):
    """Conversation state carried across turns of one session."""

    conversation_history: list[Message] = Field(default_factory=list)
    current_intent: Intent = Field(
        default_factory=lambda: Intent(
            type=IntentType.PROFILE_BUILDING, confidence=1.0
        )
    )
    active_topics: list[str] = Field(default_factory=list)
    pending_actions: list[ActionStep] = Field(default_factory=list)

    def snapshot(self) -> "SessionContext":
        """Return an independent value copy of this context."""
        return self.model_copy(deep=True)


class Session(BaseModel):
    id: str
    user_id: str
    start_time: datetime
    last_activity: datetime
    context: SessionContext = Field(default_factory=SessionContext)

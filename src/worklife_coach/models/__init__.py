"""Data models for the coaching core."""

from .analysis import (
    CareerStage,
    GapPriority,
    ProfileAnalysis,
    ProfileCompleteness,
    ProgressReport,
    ReadinessFactors,
    ReadinessScore,
    SkillGap,
    TimeRange,
)
from .config import CoachingConfig, CoachParams, RetryConfig, SessionConfig
from .core import (
    ActionCategory,
    ActionStep,
    CareerInfo,
    CareerPath,
    Challenge,
    ChallengeType,
    Goal,
    GoalType,
    Intent,
    IntentType,
    Message,
    MessageSender,
    Milestone,
    Mindset,
    PersonalInfo,
    Progress,
    Session,
    SessionContext,
    Skill,
    SkillSet,
    Timeframe,
    UserProfile,
    utc_now,
)
from .recommendations import (
    DifficultyLevel,
    GrowthOpportunity,
    GrowthPlan,
    InRoleGrowthAnalysis,
    Phase,
    PhaseObjective,
    Recommendations,
    SkillRecommendation,
    StagnationAssessment,
    TransitionPhase,
    TransitionPlan,
)

__all__ = [
    "ActionCategory",
    "ActionStep",
    "CareerInfo",
    "CareerPath",
    "CareerStage",
    "Challenge",
    "ChallengeType",
    "CoachParams",
    "CoachingConfig",
    "DifficultyLevel",
    "GapPriority",
    "Goal",
    "GoalType",
    "GrowthOpportunity",
    "GrowthPlan",
    "InRoleGrowthAnalysis",
    "Intent",
    "IntentType",
    "Message",
    "MessageSender",
    "Milestone",
    "Mindset",
    "PersonalInfo",
    "Phase",
    "PhaseObjective",
    "ProfileAnalysis",
    "ProfileCompleteness",
    "Progress",
    "ProgressReport",
    "ReadinessFactors",
    "ReadinessScore",
    "Recommendations",
    "RetryConfig",
    "Session",
    "SessionConfig",
    "SessionContext",
    "Skill",
    "SkillGap",
    "SkillRecommendation",
    "SkillSet",
    "StagnationAssessment",
    "TimeRange",
    "Timeframe",
    "TransitionPhase",
    "TransitionPlan",
    "UserProfile",
    "utc_now",
]

"""
Profile Analysis Models

Result types produced by the profile analyzer.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from .core import Challenge


class CareerStage(str, Enum):
    EARLY = "early"
    MID = "mid"
    TRANSITION = "transition"


class GapPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ProfileAnalysis(BaseModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    career_stage: CareerStage
    confidence_level: float = Field(..., ge=0.0, le=1.0)
    primary_challenges: list[Challenge] = Field(default_factory=list)


class SkillGap(BaseModel):
    """Distance between a current skill level and the level a path needs."""

    skill: str
    current_level: int = Field(..., ge=0, le=10)
    target_level: int = Field(..., ge=0, le=10)
    priority: GapPriority
    estimated_learning_time: str

    @property
    def size(self) -> int:
        return self.target_level - self.current_level


class ReadinessFactors(BaseModel):
    skill_alignment: float
    experience_level: float
    motivation_level: float


class ReadinessScore(BaseModel):
    score: float = Field(..., ge=0.0, le=1.0)
    factors: ReadinessFactors
    blockers: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class TimeRange(BaseModel):
    """Inclusive time window."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def validate_ordering(self) -> "TimeRange":
        if self.end < self.start:
            raise ValueError("Time range end must not precede its start")
        return self


class ProgressReport(BaseModel):
    user_id: str
    timeframe: TimeRange
    completed_actions: int = 0
    completed_milestones: int = 0
    skills_acquired: list[str] = Field(default_factory=list)
    goals_achieved: int = 0
    overall_progress: float = Field(default=0.0, ge=0.0, le=1.0)


class ProfileCompleteness(BaseModel):
    is_complete: bool
    missing_fields: list[str] = Field(default_factory=list)

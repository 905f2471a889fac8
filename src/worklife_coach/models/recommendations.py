"""
Recommendation Models

Pydantic models for the guidance artifacts produced by the recommendation
engine: skill recommendations, growth plans, transition plans, and in-role
growth analysis.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .core import ActionStep, CareerPath, Milestone, utc_now


class DifficultyLevel(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


class SkillRecommendation(BaseModel):
    """A skill to learn, with the skills that must come first."""

    skill: str
    priority: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    learning_resources: list[str] = Field(default_factory=list)
    estimated_time: str
    dependencies: list[str] = Field(
        default_factory=list, description="Skills to learn before this one"
    )


class PhaseObjective(BaseModel):
    """Objective inside a growth plan phase, traceable to a career path."""

    id: str
    description: str
    career_path_id: str


class Phase(BaseModel):
    name: str
    duration: str
    start_month: int = Field(..., ge=0)
    end_month: int = Field(..., gt=0)
    objectives: list[PhaseObjective] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    actions: list[ActionStep] = Field(default_factory=list)


class GrowthPlan(BaseModel):
    id: str
    user_id: str
    career_path: CareerPath
    timeline: str
    phases: list[Phase] = Field(default_factory=list)
    milestones: list[Milestone] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    last_updated: datetime = Field(default_factory=utc_now)


class TransitionPhase(BaseModel):
    name: str
    duration: str
    focus: str
    actions: list[ActionStep] = Field(default_factory=list)
    success_criteria: list[str] = Field(default_factory=list)


class TransitionPlan(BaseModel):
    source_field: str
    target_field: str
    transferable_skills: list[str] = Field(default_factory=list)
    skills_to_acquire: list[SkillRecommendation] = Field(default_factory=list)
    phases: list[TransitionPhase] = Field(default_factory=list)
    estimated_duration: str
    estimated_months: int = Field(..., gt=0, description="Midpoint of the estimate")
    difficulty_level: DifficultyLevel
    risks: list[str] = Field(default_factory=list)
    success_factors: list[str] = Field(default_factory=list)


class GrowthOpportunity(BaseModel):
    type: str = Field(
        ..., description="responsibility, visibility, skill_development or leadership"
    )
    description: str
    actionable: bool = True
    estimated_impact: str = Field(default="medium", description="high, medium or low")


class StagnationAssessment(BaseModel):
    is_stagnant: bool
    severity: str = Field(..., description="high, medium or low")
    reasons: list[str] = Field(default_factory=list)
    honest_assessment: str
    growth_limitations: list[str] = Field(default_factory=list)


class InRoleGrowthAnalysis(BaseModel):
    """Growth options that keep the user in their current role."""

    scope: str = "current_role_only"
    opportunities: list[GrowthOpportunity] = Field(default_factory=list)
    skill_recommendations: list[SkillRecommendation] = Field(default_factory=list)
    stagnation_assessment: Optional[StagnationAssessment] = None
    alternative_paths: list[CareerPath] = Field(default_factory=list)


class Recommendations(BaseModel):
    """Structured guidance attached to a coaching response, grouped by kind."""

    career_paths: Optional[list[CareerPath]] = None
    skills: Optional[list[SkillRecommendation]] = None
    actions: Optional[list[ActionStep]] = None
    growth_plan: Optional[GrowthPlan] = None
    transition_plan: Optional[TransitionPlan] = None
    in_role_growth: Optional[InRoleGrowthAnalysis] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)

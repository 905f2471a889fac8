"""
Recommendation Engine

Facade over the recommendation modules. All operations are pure functions of
the supplied profile snapshot; limits come from CoachingConfig.

Example Usage:
    engine = RecommendationEngine()
    paths = engine.generate_career_paths(profile)
    skills = engine.recommend_skills(profile, paths[0])
    plan = engine.build_growth_plan(profile, paths[0])
"""

from datetime import datetime
from typing import Optional

from ..models.config import CoachingConfig
from ..models.core import ActionStep, CareerPath, Goal, Timeframe, UserProfile
from ..models.recommendations import (
    GrowthPlan,
    InRoleGrowthAnalysis,
    SkillRecommendation,
    TransitionPlan,
)
from ..profile.analyzer import ProfileAnalyzer
from . import action_steps, career_paths, growth_plan, in_role_growth, skills, transition


class RecommendationEngine:
    """Produces career paths, skills, action steps, growth and transition plans."""

    def __init__(
        self,
        config: Optional[CoachingConfig] = None,
        analyzer: Optional[ProfileAnalyzer] = None,
    ) -> None:
        self.config = config or CoachingConfig()
        self.analyzer = analyzer or ProfileAnalyzer()

    def generate_career_paths(self, profile: UserProfile) -> list[CareerPath]:
        """Best-fit paths, capped at max_career_paths, annotated with trade-offs."""
        paths = career_paths.generate_career_paths(
            profile, limit=self.config.max_career_paths
        )
        return career_paths.identify_trade_offs(paths)

    def recommend_skills(
        self, profile: UserProfile, career_path: CareerPath
    ) -> list[SkillRecommendation]:
        return skills.recommend_skills(
            profile,
            career_path,
            analyzer=self.analyzer,
            limit=self.config.max_skill_recommendations,
        )

    def get_highest_impact_skill(
        self, profile: UserProfile, career_path: CareerPath
    ) -> Optional[SkillRecommendation]:
        return skills.get_highest_impact_skill(
            profile, career_path, self.recommend_skills(profile, career_path)
        )

    def create_action_steps(
        self,
        goal: Optional[Goal] = None,
        timeframe: Optional[Timeframe] = None,
        profile: Optional[UserProfile] = None,
        career_path: Optional[CareerPath] = None,
        skill_recommendations: Optional[list[SkillRecommendation]] = None,
        now: Optional[datetime] = None,
    ) -> list[ActionStep]:
        """
        Steps for one goal, or for all of the profile's goals when goal is None.

        Never empty: with nothing to plan for, a single reflection step is
        returned.
        """
        if goal is not None:
            steps = action_steps.create_action_steps(
                goal,
                timeframe=timeframe,
                profile=profile,
                career_path=career_path,
                skill_recommendations=skill_recommendations,
                now=now,
            )
        else:
            goals = profile.career_info.goals if profile else []
            steps = action_steps.create_action_steps_for_goals(
                goals,
                profile=profile,
                career_path=career_path,
                skill_recommendations=skill_recommendations,
                now=now,
            )
            if timeframe is not None:
                steps = [s for s in steps if s.timeframe == timeframe]
        return steps or [action_steps.reflection_step(now)]

    def profile_building_steps(
        self, profile: UserProfile, now: Optional[datetime] = None
    ) -> list[ActionStep]:
        """Steps that fill profile gaps; regular goal steps once nothing is missing."""
        completeness = self.analyzer.check_profile_completeness(profile)
        steps = action_steps.profile_building_steps(completeness.missing_fields, now)
        return steps or self.create_action_steps(
            profile=profile, career_path=profile.career_info.current_path, now=now
        )

    def mindset_steps(self, now: Optional[datetime] = None) -> list[ActionStep]:
        return action_steps.mindset_steps(now)

    def build_growth_plan(
        self, profile: UserProfile, career_path: CareerPath, now: Optional[datetime] = None
    ) -> GrowthPlan:
        return growth_plan.build_growth_plan(profile, career_path, now=now)

    def adapt_growth_plan(
        self, plan: GrowthPlan, profile: UserProfile, now: Optional[datetime] = None
    ) -> GrowthPlan:
        return growth_plan.adapt_growth_plan(plan, profile, now=now)

    def provide_transition_guidance(
        self, source_field: Optional[str], target_field: str, profile: UserProfile
    ) -> TransitionPlan:
        return transition.provide_transition_guidance(source_field, target_field, profile)

    def analyze_in_role_growth(self, profile: UserProfile) -> InRoleGrowthAnalysis:
        return in_role_growth.analyze_in_role_growth(profile)

    def generate_progress_acknowledgment(
        self, completed_steps: list[ActionStep], profile: UserProfile
    ) -> str:
        # Steps already recorded on the profile are not counted twice
        new_ids = {s.id for s in completed_steps}
        previous = sum(1 for a in profile.progress.completed_actions if a not in new_ids)
        return action_steps.generate_progress_acknowledgment(completed_steps, previous)

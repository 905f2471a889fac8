"""Recommendation engine: career paths, skills, action steps, growth and transition plans."""

from .action_steps import (
    balance_timeframes,
    create_action_steps,
    create_action_steps_for_goals,
    generate_progress_acknowledgment,
)
from .career_paths import generate_career_paths, identify_trade_offs
from .engine import RecommendationEngine
from .growth_plan import (
    adapt_growth_plan,
    build_growth_plan,
    validate_action_objective_linkage,
    validate_growth_plan_timeline,
)
from .in_role_growth import analyze_in_role_growth
from .skills import get_highest_impact_skill, order_by_dependencies, recommend_skills
from .transition import provide_transition_guidance

__all__ = [
    "RecommendationEngine",
    "adapt_growth_plan",
    "analyze_in_role_growth",
    "balance_timeframes",
    "build_growth_plan",
    "create_action_steps",
    "create_action_steps_for_goals",
    "generate_career_paths",
    "generate_progress_acknowledgment",
    "get_highest_impact_skill",
    "identify_trade_offs",
    "order_by_dependencies",
    "provide_transition_guidance",
    "recommend_skills",
    "validate_action_objective_linkage",
    "validate_growth_plan_timeline",
]

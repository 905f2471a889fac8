"""
Response Formatter

Turns structured recommendations into conversational markdown. Each
recommendation kind renders through its own Jinja2 template; combined
responses always put mindset support first and always end with something
the user can act on.

Section order of a combined response:
    mindset support, progress acknowledgment, transition plan, growth plan,
    career paths, skills, action steps, in-role growth

Example Usage:
    formatter = ResponseFormatter()
    formatted = formatter.format_combined(
        Recommendations(skills=skills),
        intent_type=IntentType.SKILL_GUIDANCE,
        mindset_text="Feeling stuck is a signal...",
    )
    print(formatted.content)
"""

from datetime import datetime
from typing import Optional

import structlog
from pydantic import BaseModel

from ..models.core import ActionStep, CareerPath, GoalType, IntentType, Timeframe, UserProfile, utc_now
from ..models.recommendations import (
    GrowthPlan,
    InRoleGrowthAnalysis,
    Recommendations,
    SkillRecommendation,
    TransitionPlan,
)
from ..utils.template_loader import TemplateLoader, get_default_loader
from .coach_behavior import follow_up_question, has_actionable_element, temper_exclamations

logger = structlog.get_logger(__name__)

TIMEFRAME_LABELS = (
    (Timeframe.TODAY, "Today"),
    (Timeframe.THIS_WEEK, "This Week"),
    (Timeframe.THIS_MONTH, "This Month"),
)
MAX_LISTED_SKILLS = 3
MAX_LISTED_MILESTONES = 3


class FormattedResponse(BaseModel):
    content: str
    has_actionable_element: bool


def months_until(target: datetime, now: datetime) -> int:
    """Whole calendar months from now to target, never negative."""
    months = (target.year - now.year) * 12 + (target.month - now.month)
    return max(0, months)


class ResponseFormatter:
    """Renders recommendations as coaching text."""

    def __init__(self, loader: Optional[TemplateLoader] = None) -> None:
        self.loader = loader or get_default_loader()

    def format_career_paths(self, paths: list[CareerPath]) -> str:
        return self.loader.render("career_paths.j2", paths=paths)

    def format_skills(
        self, skills: list[SkillRecommendation], profile: Optional[UserProfile] = None
    ) -> str:
        has_short_term_goal = bool(profile) and any(
            g.type == GoalType.SHORT_TERM for g in profile.career_info.goals
        )
        return self.loader.render(
            "skills.j2",
            skills=skills,
            max_listed=MAX_LISTED_SKILLS,
            has_short_term_goal=has_short_term_goal,
        )

    def format_action_steps(self, actions: list[ActionStep]) -> str:
        groups = [
            (label, [a for a in actions if a.timeframe == timeframe])
            for timeframe, label in TIMEFRAME_LABELS
        ]
        return self.loader.render(
            "action_steps.j2", groups=[(label, steps) for label, steps in groups if steps]
        )

    def format_growth_plan(self, plan: GrowthPlan, now: Optional[datetime] = None) -> str:
        now = now or utc_now()
        milestones = [
            (m, months_until(m.target_date, now))
            for m in plan.milestones[:MAX_LISTED_MILESTONES]
        ]
        return self.loader.render(
            "growth_plan.j2",
            plan=plan,
            milestones=milestones,
            first_phase=plan.phases[0] if plan.phases else None,
        )

    def format_transition_plan(self, plan: TransitionPlan) -> str:
        return self.loader.render("transition_plan.j2", plan=plan)

    def format_in_role_growth(self, analysis: InRoleGrowthAnalysis) -> str:
        return self.loader.render("in_role_growth.j2", analysis=analysis)

    def format_combined(
        self,
        recommendations: Recommendations,
        intent_type: IntentType = IntentType.PROFILE_BUILDING,
        *,
        mindset_text: Optional[str] = None,
        acknowledgment: Optional[str] = None,
        profile: Optional[UserProfile] = None,
        now: Optional[datetime] = None,
    ) -> FormattedResponse:
        """
        Assemble a full response.

        Args:
            recommendations: Guidance to render; absent kinds are skipped
            intent_type: Selects the follow-up question when one is needed
            mindset_text: Supportive opening; always rendered first
            acknowledgment: Progress acknowledgment, rendered after mindset text
            profile: Used for goal-aware wording
            now: Reference time for milestone distances

        Returns:
            FormattedResponse whose content always holds an actionable element
        """
        sections: list[str] = []
        if mindset_text:
            sections.append(mindset_text)
        if acknowledgment:
            sections.append(acknowledgment)

        if recommendations.transition_plan is not None:
            sections.append(self.format_transition_plan(recommendations.transition_plan))
        if recommendations.growth_plan is not None:
            sections.append(self.format_growth_plan(recommendations.growth_plan, now))
        if recommendations.career_paths:
            sections.append(self.format_career_paths(recommendations.career_paths))
        if recommendations.skills:
            sections.append(self.format_skills(recommendations.skills, profile))
        if recommendations.actions:
            sections.append(self.format_action_steps(recommendations.actions))
        if recommendations.in_role_growth is not None:
            sections.append(self.format_in_role_growth(recommendations.in_role_growth))

        content = "\n\n".join(s for s in sections if s)
        if not has_actionable_element(content):
            content = "\n\n".join(
                s for s in (content, follow_up_question(intent_type, profile is not None)) if s
            )

        logger.debug(
            "response_formatted",
            sections=len(sections),
            mindset_first=bool(mindset_text),
            intent=intent_type.value,
        )
        return FormattedResponse(
            content=temper_exclamations(content), has_actionable_element=True
        )

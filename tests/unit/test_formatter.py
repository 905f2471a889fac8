"""
Unit tests for the response formatter.
"""

from datetime import datetime, timezone

import pytest

from worklife_coach.conversation.coach_behavior import FOLLOW_UP_QUESTIONS, OPENING_QUESTION
from worklife_coach.conversation.formatter import ResponseFormatter, months_until
from worklife_coach.models.core import ActionCategory, ActionStep, IntentType, Timeframe
from worklife_coach.models.recommendations import Recommendations, SkillRecommendation
from worklife_coach.recommendations.career_paths import default_career_path
from worklife_coach.recommendations.growth_plan import build_growth_plan
from worklife_coach.recommendations.in_role_growth import analyze_in_role_growth
from worklife_coach.recommendations.transition import provide_transition_guidance
from worklife_coach.utils.template_loader import TemplateLoader


@pytest.fixture
def formatter() -> ResponseFormatter:
    return ResponseFormatter()


def action(step_id: str, timeframe: Timeframe) -> ActionStep:
    return ActionStep(
        id=step_id,
        description=f"Do {step_id}",
        timeframe=timeframe,
        category=ActionCategory.APPLICATION,
    )


def skill(name: str, priority: float = 0.8, deps=()) -> SkillRecommendation:
    return SkillRecommendation(
        skill=name,
        priority=priority,
        reasoning=f"{name} matters.",
        estimated_time="2 months",
        dependencies=list(deps),
    )


class TestSections:
    """Test cases for the single-section renderers."""

    def test_single_career_path(self, formatter):
        """Test the wording for one path."""
        text = formatter.format_career_paths([default_career_path()])

        assert "**General Career Development**" in text
        assert "(fit score: 50%)" in text

    def test_several_career_paths_are_numbered(self, formatter, data_science_path):
        """Test that multiple paths are listed with their fit."""
        text = formatter.format_career_paths([data_science_path, default_career_path()])

        assert text.startswith("I see 2 promising career paths for you:")
        assert "1. **Data Science** (fit: 80%)" in text
        assert "2. **General Career Development** (fit: 50%)" in text

    def test_skills_list_with_prerequisites(self, formatter, engineer_profile):
        """Test that skills are numbered with prerequisites and a short-term nudge."""
        skills = [skill("statistics", 0.75), skill("machine learning", 0.7, ["statistics"])]

        text = formatter.format_skills(skills, engineer_profile)

        assert "1. **statistics** (Priority: 0.75)" in text
        assert "Learn first: statistics" in text
        assert "I'd suggest starting with **statistics**" in text

    def test_single_skill(self, formatter):
        """Test the single-skill wording."""
        text = formatter.format_skills([skill("sql")])
        assert text.startswith("The most impactful skill for you to develop right now is **sql**.")

    def test_action_steps_grouped_by_timeframe(self, formatter):
        """Test that steps are grouped in timeframe order and empty groups skipped."""
        text = formatter.format_action_steps(
            [action("b", Timeframe.THIS_MONTH), action("a", Timeframe.TODAY)]
        )

        assert text.index("**Today:**") < text.index("**This Month:**")
        assert "**This Week:**" not in text
        assert "- Do a" in text

    def test_empty_action_steps_ask_a_question(self, formatter):
        """Test that no steps still yields a question."""
        assert formatter.format_action_steps([]).endswith("What's your biggest priority right now?")

    def test_growth_plan(self, formatter, engineer_profile, data_science_path, fixed_now):
        """Test that milestones show their distance in months."""
        plan = build_growth_plan(engineer_profile, data_science_path, now=fixed_now)

        text = formatter.format_growth_plan(plan, now=fixed_now)

        assert "6-12 months growth plan" in text
        assert "1. Complete Foundation Phase (4 months)" in text
        assert "**Your First Phase: Foundation** (0-4 months)" in text

    def test_transition_plan(self, formatter, engineer_profile):
        """Test the transition summary."""
        plan = provide_transition_guidance(None, "data science", engineer_profile)

        text = formatter.format_transition_plan(plan)

        assert "from **technology** to **data science**" in text
        assert "**Timeline:** 11-17 months (moderate transition)" in text
        assert "- Begin learning statistics" in text

    def test_in_role_growth(self, formatter, engineer_profile):
        """Test that the stagnation assessment and alternatives are shown."""
        text = formatter.format_in_role_growth(analyze_in_role_growth(engineer_profile))

        assert text.startswith("**Growing in your current role:**")
        assert "System Design, Testing" in text
        assert "Options worth considering:" in text


class TestFormatCombined:
    """Test cases for format_combined."""

    def test_mindset_first(self, formatter):
        """Test that mindset support opens the response."""
        result = formatter.format_combined(
            Recommendations(actions=[action("a", Timeframe.TODAY)]),
            IntentType.ACTION_PLANNING,
            mindset_text="You're doing better than you think.",
            acknowledgment="Great work finishing that!",
        )

        assert result.content.startswith("You're doing better than you think.")
        assert result.content.index("Great work") < result.content.index("Here are your next steps")
        assert result.has_actionable_element

    def test_section_order(self, formatter, engineer_profile, data_science_path, fixed_now):
        """Test the fixed order of rendered sections."""
        recommendations = Recommendations(
            career_paths=[data_science_path],
            skills=[skill("statistics")],
            growth_plan=build_growth_plan(engineer_profile, data_science_path, now=fixed_now),
        )

        content = formatter.format_combined(recommendations, now=fixed_now).content

        assert content.index("Key Milestones") < content.index("fit score")
        assert content.index("fit score") < content.index("most impactful skill")

    def test_follow_up_added_when_nothing_actionable(self, engineer_profile):
        """Test that a follow-up question is appended to passive content."""
        # Arrange
        loader = TemplateLoader()
        formatter = ResponseFormatter(loader)

        # Act
        result = formatter.format_combined(
            Recommendations(),
            IntentType.GROWTH_PLANNING,
            mindset_text="That sounds hard.",
            profile=engineer_profile,
        )

        # Assert
        assert result.content == (
            "That sounds hard.\n\n" + FOLLOW_UP_QUESTIONS[IntentType.GROWTH_PLANNING]
        )

    def test_opening_question_for_unknown_user(self, formatter):
        """Test that without a profile the opening question is used."""
        result = formatter.format_combined(Recommendations(), IntentType.SKILL_GUIDANCE)
        assert result.content == OPENING_QUESTION

    def test_exclamations_tempered(self, formatter, engineer_profile):
        """Test that the response never shouts."""
        result = formatter.format_combined(
            Recommendations(),
            mindset_text="Amazing! Brilliant! Fantastic! Wonderful!",
            profile=engineer_profile,
        )
        assert result.content.count("!") == 2


class TestMonthsUntil:
    """Test cases for months_until."""

    def test_calendar_months(self, fixed_now):
        """Test whole calendar months between dates."""
        target = datetime(2025, 5, 1, tzinfo=timezone.utc)
        assert months_until(target, fixed_now) == 4

    def test_never_negative(self, fixed_now):
        """Test that past dates count as zero."""
        assert months_until(datetime(2024, 1, 1, tzinfo=timezone.utc), fixed_now) == 0

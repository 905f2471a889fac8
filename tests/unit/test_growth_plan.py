"""
Unit tests for growth plans.
"""

from datetime import datetime, timezone

import pytest

from worklife_coach.models.core import Milestone
from worklife_coach.recommendations.growth_plan import (
    LONG_LAYOUT,
    MEDIUM_LAYOUT,
    SHORT_LAYOUT,
    adapt_growth_plan,
    add_months,
    build_growth_plan,
    clamp_to_window,
    phase_layout,
    validate_action_objective_linkage,
    validate_growth_plan_timeline,
)


@pytest.fixture
def plan(engineer_profile, data_science_path, fixed_now):
    return build_growth_plan(engineer_profile, data_science_path, now=fixed_now)


class TestCalendarHelpers:
    """Test cases for month arithmetic."""

    def test_add_months_clamps_day(self):
        """Test that month-end dates land on the target month's last day."""
        jan_31 = datetime(2025, 1, 31, tzinfo=timezone.utc)
        assert add_months(jan_31, 1).date() == datetime(2025, 2, 28).date()

    def test_add_months_crosses_year(self, fixed_now):
        """Test that adding months rolls the year."""
        assert add_months(fixed_now, 12).year == 2026
        assert add_months(fixed_now, 14).month == 3

    def test_clamp_to_window(self, fixed_now):
        """Test that targets are pulled inside three to twelve months."""
        assert clamp_to_window(fixed_now, fixed_now) == add_months(fixed_now, 3)
        assert clamp_to_window(add_months(fixed_now, 30), fixed_now) == add_months(fixed_now, 12)
        assert clamp_to_window(add_months(fixed_now, 5), fixed_now) == add_months(fixed_now, 5)

    @pytest.mark.parametrize(
        "timeline, layout",
        [
            ("3-6 months", SHORT_LAYOUT),
            ("6-12 months", MEDIUM_LAYOUT),
            ("18-24 months", LONG_LAYOUT),
            ("unknown", MEDIUM_LAYOUT),
        ],
    )
    def test_phase_layout(self, timeline, layout):
        """Test that the transition time selects the phase layout."""
        assert phase_layout(timeline) == layout


class TestBuildGrowthPlan:
    """Test cases for build_growth_plan."""

    def test_medium_plan_shape(self, plan, fixed_now):
        """Test that a 6-12 month path gets three phases and milestones."""
        assert [p.name for p in plan.phases] == ["Foundation", "Development", "Advancement"]
        assert len(plan.milestones) == 3
        assert plan.user_id == "user-engineer"
        assert plan.created_at == fixed_now
        assert plan.timeline == "6-12 months"

    def test_timeline_and_linkage_hold(self, plan):
        """Test that a fresh plan passes both checks."""
        assert validate_growth_plan_timeline(plan)
        assert validate_action_objective_linkage(plan)

    def test_objectives_reference_path(self, plan, data_science_path):
        """Test that every objective names the plan's career path."""
        assert all(
            o.career_path_id == data_science_path.id
            for phase in plan.phases
            for o in phase.objectives
        )

    def test_required_skills_spread_over_phases(self, plan, data_science_path):
        """Test that every required skill is practised in some phase."""
        practised = [skill for phase in plan.phases for skill in phase.skills]
        assert sorted(practised) == sorted(data_science_path.required_skills)

    def test_long_path_milestones_clamped(self, engineer_profile, data_science_path, fixed_now):
        """Test that a two-year path keeps milestones within twelve months."""
        long_path = data_science_path.model_copy(update={"time_to_transition": "18-24 months"})

        plan = build_growth_plan(engineer_profile, long_path, now=fixed_now)

        assert len(plan.phases) == 4
        assert validate_growth_plan_timeline(plan)
        assert max(m.target_date for m in plan.milestones) == add_months(fixed_now, 12)

    def test_short_path(self, engineer_profile, data_science_path, fixed_now):
        """Test that a short path has two phases and an early first milestone."""
        short_path = data_science_path.model_copy(update={"time_to_transition": "3-6 months"})

        plan = build_growth_plan(engineer_profile, short_path, now=fixed_now)

        assert [p.name for p in plan.phases] == ["Foundation", "Execution"]
        assert plan.milestones[0].target_date == add_months(fixed_now, 3)
        assert [p.skills for p in plan.phases] == [
            ["statistics", "python"],
            ["machine learning", "data visualization"],
        ]


class TestValidation:
    """Test cases for the plan checks."""

    def test_milestone_outside_window_fails(self, plan, fixed_now):
        """Test that a milestone two months out violates the window."""
        plan.milestones[0].target_date = add_months(fixed_now, 2)
        assert not validate_growth_plan_timeline(plan)

    def test_dangling_objective_reference_fails(self, plan):
        """Test that an action pointing at another phase's objective fails."""
        foreign = plan.phases[1].objectives[0].id
        plan.phases[0].actions[0].objective_id = foreign
        assert not validate_action_objective_linkage(plan)

    def test_objective_for_other_path_fails(self, plan):
        """Test that an objective tied to another path fails."""
        plan.phases[0].objectives[0].career_path_id = "path-other"
        assert not validate_action_objective_linkage(plan)


class TestAdaptGrowthPlan:
    """Test cases for adapt_growth_plan."""

    def test_marks_completed_milestones(self, plan, engineer_profile, fixed_now):
        """Test that milestones completed on the profile are marked complete."""
        # Arrange
        done = plan.milestones[1]
        engineer_profile.progress.milestones.append(
            Milestone(id=done.id, title=done.title, target_date=done.target_date, completed=True)
        )
        later = add_months(fixed_now, 1)

        # Act
        adapted = adapt_growth_plan(plan, engineer_profile, now=later)

        # Assert
        assert adapted.milestones[1].completed
        assert adapted.milestones[1].completed_date == later
        assert not plan.milestones[1].completed
        assert adapted.last_updated == later

    def test_overdue_milestones_pushed_within_window(self, plan, engineer_profile, fixed_now):
        """Test that overdue open milestones move out but stay in the window."""
        # Act
        adapted = adapt_growth_plan(plan, engineer_profile, now=add_months(fixed_now, 5))

        # Assert
        assert adapted.milestones[0].target_date == add_months(fixed_now, 8)
        assert validate_growth_plan_timeline(adapted)

    def test_phase_actions_pick_up_completion(self, plan, engineer_profile, fixed_now):
        """Test that completed action ids flow into the plan."""
        action_id = plan.phases[0].actions[0].id
        engineer_profile.progress.completed_actions = [action_id]

        adapted = adapt_growth_plan(plan, engineer_profile, now=fixed_now)

        assert adapted.phases[0].actions[0].completed
        assert not adapted.phases[0].actions[1].completed

"""
Unit tests for career transition guidance.
"""

import pytest

from worklife_coach.models.core import UserProfile
from worklife_coach.models.recommendations import DifficultyLevel
from worklife_coach.recommendations.catalog import get_field_profile
from worklife_coach.recommendations.transition import (
    TransferableSkill,
    assess_difficulty,
    build_transition_phases,
    estimate_transition_months,
    format_duration,
    identify_skills_to_acquire,
    identify_transferable_skills,
    provide_transition_guidance,
)


class TestTransferableSkills:
    """Test cases for identify_transferable_skills."""

    def test_core_and_universal_skills_carry_over(self, engineer_profile):
        """Test that target core skills rank above general skills."""
        # Arrange
        source = get_field_profile("technology")
        target = get_field_profile("data science")

        # Act
        skills = identify_transferable_skills(engineer_profile, source, target)

        # Assert
        assert [s.skill for s in skills] == ["python", "sql", "communication"]
        assert skills[0].transferability == 1.0
        assert skills[2].transferability == pytest.approx(0.9)

    def test_low_level_reduces_transferability(self, engineer_profile):
        """Test that a weak skill transfers less."""
        engineer_profile.skills.current[0].level = 2
        source = get_field_profile("technology")
        target = get_field_profile("data science")

        python = identify_transferable_skills(engineer_profile, source, target)[-1]

        assert python.skill == "python"
        assert python.transferability == pytest.approx(0.4)


class TestSkillsToAcquire:
    """Test cases for identify_skills_to_acquire."""

    def test_missing_core_skills_in_prerequisite_order(self, engineer_profile):
        """Test that only unheld core skills are listed, prerequisites first."""
        skills = identify_skills_to_acquire(engineer_profile, get_field_profile("data science"))

        assert [s.skill for s in skills] == [
            "statistics",
            "data visualization",
            "machine learning",
        ]


class TestDifficultyAndDuration:
    """Test cases for difficulty and duration estimates."""

    def test_unrelated_fields_are_challenging(self):
        """Test that nothing transferable and every skill missing is challenging."""
        source = get_field_profile("retail")
        target = get_field_profile("ux design")
        assert assess_difficulty([], 5, source, target) == DifficultyLevel.CHALLENGING

    def test_close_fields_are_easy(self):
        """Test that strong carry-over with no gaps is easy."""
        target = get_field_profile("data science")
        transferable = [TransferableSkill("python", 1.0, 1.0)]
        assert assess_difficulty(transferable, 0, target, target) == DifficultyLevel.EASY

    @pytest.mark.parametrize("missing", [0, 3, 10])
    @pytest.mark.parametrize("years", [0, 3, 8])
    def test_duration_never_drops_as_difficulty_rises(self, missing, years):
        """Test that harder transitions never take less time."""
        months = [
            estimate_transition_months(level, missing, years)
            for level in (
                DifficultyLevel.EASY,
                DifficultyLevel.MODERATE,
                DifficultyLevel.CHALLENGING,
            )
        ]
        assert months == sorted(months)

    def test_experience_shortens_duration(self):
        """Test the experience multiplier."""
        assert estimate_transition_months(DifficultyLevel.MODERATE, 3, 0) == 18
        assert estimate_transition_months(DifficultyLevel.MODERATE, 3, 3) == 16
        assert estimate_transition_months(DifficultyLevel.MODERATE, 3, 6) == 14

    def test_format_duration(self):
        """Test that the range is three months either side, at least three."""
        assert format_duration(14) == "11-17 months"
        assert format_duration(4) == "3-7 months"

    @pytest.mark.parametrize(
        "difficulty, count",
        [
            (DifficultyLevel.EASY, 1),
            (DifficultyLevel.MODERATE, 2),
            (DifficultyLevel.CHALLENGING, 3),
        ],
    )
    def test_phase_count(self, difficulty, count):
        """Test that harder transitions have more phases."""
        phases = build_transition_phases(difficulty, [])
        assert len(phases) == count
        assert all(p.actions and p.success_criteria for p in phases)


class TestProvideTransitionGuidance:
    """Test cases for provide_transition_guidance."""

    def test_engineer_to_data_science(self, engineer_profile):
        """Test a moderate move with the source taken from the profile."""
        # Act
        plan = provide_transition_guidance(None, "data science", engineer_profile)

        # Assert
        assert plan.source_field == "technology"
        assert plan.difficulty_level == DifficultyLevel.MODERATE
        assert plan.estimated_months == 14
        assert plan.estimated_duration == "11-17 months"
        assert len(plan.phases) == 2
        assert plan.phases[0].actions[0].description == "Begin learning statistics"
        assert "Strong transferable skills: python, sql, communication" in plan.success_factors

    def test_newcomer_to_unrelated_field(self):
        """Test that a blank profile faces a challenging move with its risks."""
        # Act
        plan = provide_transition_guidance("retail", "ux design", UserProfile(user_id="u1"))

        # Assert
        assert plan.difficulty_level == DifficultyLevel.CHALLENGING
        assert plan.estimated_months == 28
        assert plan.transferable_skills == []
        assert len(plan.skills_to_acquire) == 5
        assert "Large skill gap requires substantial learning effort" in plan.risks
        assert "Limited work experience may make transition more challenging" in plan.risks

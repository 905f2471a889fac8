"""
Unit tests for career path recommendations.
"""

import pytest

from worklife_coach.models.core import CareerPath
from worklife_coach.recommendations.career_paths import (
    default_career_path,
    generate_career_paths,
    identify_trade_offs,
    parse_timeline_months,
    slugify,
)


def make_path(path_id: str, fit: float, timeline: str, growth: float) -> CareerPath:
    return CareerPath(
        id=path_id,
        title=path_id.title(),
        description="d",
        reasoning="r.",
        fit_score=fit,
        time_to_transition=timeline,
        growth_potential=growth,
    )


class TestGenerateCareerPaths:
    """Test cases for generate_career_paths."""

    def test_minimal_profile_gets_default_path(self, minimal_profile):
        """Test that a profile without signal still gets one path."""
        # Act
        paths = generate_career_paths(minimal_profile)

        # Assert
        assert len(paths) == 1
        assert paths[0].title == "General Career Development"
        assert paths[0].reasoning

    def test_engineer_best_fit_is_data_science(self, engineer_profile):
        """Test that matching interests and skills rank a path first."""
        # Act
        paths = generate_career_paths(engineer_profile)

        # Assert
        assert paths[0].title == "Data Science"
        assert paths[0].fit_score == pytest.approx(0.6267)
        assert "data analytics and machine learning" in paths[0].reasoning

    def test_sorted_by_fit_and_reasoned(self, engineer_profile):
        """Test that paths are ordered best first and always explained."""
        paths = generate_career_paths(engineer_profile)

        scores = [p.fit_score for p in paths]
        assert scores == sorted(scores, reverse=True)
        assert all(p.reasoning.strip() for p in paths)
        assert all(0.0 <= p.fit_score <= 1.0 for p in paths)

    def test_current_role_adds_senior_path(self, engineer_profile):
        """Test that a current role yields a senior path in the same role."""
        titles = [p.title for p in generate_career_paths(engineer_profile)]
        assert "Senior Software Developer" in titles

    def test_limit(self, engineer_profile):
        """Test that the limit caps the number of paths."""
        paths = generate_career_paths(engineer_profile, limit=3)

        assert [p.title for p in paths] == [
            "Data Science",
            "Senior Software Developer",
            "Software Engineering",
        ]

    def test_path_ids_are_slugs(self, engineer_profile):
        """Test that ids are derived from titles."""
        paths = generate_career_paths(engineer_profile, limit=1)
        assert paths[0].id == "path-data-science"


class TestTradeOffs:
    """Test cases for identify_trade_offs."""

    def test_single_path_unchanged(self):
        """Test that one path has nothing to compare against."""
        path = default_career_path()
        assert identify_trade_offs([path]) == [path]

    def test_relative_strengths(self):
        """Test that each path names its strengths and weaknesses."""
        # Arrange
        paths = [
            make_path("fit", 0.9, "12-18 months", 0.7),
            make_path("fast", 0.6, "3-6 months", 0.6),
            make_path("growth", 0.5, "18-24 months", 0.95),
        ]

        # Act
        fit, fast, growth = identify_trade_offs(paths)

        # Assert
        assert fit.trade_offs == [
            "Best overall fit for your profile",
            "Longer transition time compared to Fast",
            "Lower growth potential than Growth",
        ]
        assert "Fastest path to transition" in fast.trade_offs
        assert "Highest long-term growth potential" in growth.trade_offs
        assert "Trade-offs:" in fit.reasoning

    def test_input_not_mutated(self):
        """Test that annotation returns copies."""
        paths = [make_path("a", 0.9, "3-6 months", 0.7), make_path("b", 0.5, "6-12 months", 0.8)]
        identify_trade_offs(paths)
        assert paths[0].trade_offs == []


class TestHelpers:
    """Test cases for parsing helpers."""

    @pytest.mark.parametrize(
        "text, expected",
        [("3-6 months", 4.5), ("6-12 months", 9.0), ("4 months", 4.0), ("soon", 12.0), ("", 12.0)],
    )
    def test_parse_timeline_months(self, text, expected):
        """Test the midpoint of a timeline string."""
        assert parse_timeline_months(text) == expected

    def test_slugify(self):
        """Test that slugs are lowercase and hyphenated."""
        assert slugify("UX/UI Design") == "ux-ui-design"

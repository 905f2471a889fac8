"""
Shared fixtures for unit tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from worklife_coach.models.core import (
    CareerInfo,
    CareerPath,
    Challenge,
    ChallengeType,
    Goal,
    GoalType,
    Mindset,
    PersonalInfo,
    Skill,
    SkillSet,
    UserProfile,
)


class FakeClock:
    """Manually advanced clock for boundary checks."""

    def __init__(self):
        self.now = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fixed_now() -> datetime:
    """A Wednesday in the middle of a 31-day month."""
    return datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def minimal_profile() -> UserProfile:
    return UserProfile(user_id="user-minimal")


@pytest.fixture
def engineer_profile() -> UserProfile:
    """Mid-career developer interested in data work."""
    return UserProfile(
        user_id="user-engineer",
        personal_info=PersonalInfo(
            age=30,
            current_role="Software Developer",
            years_of_experience=6,
            education="BSc Computer Science",
            industry="technology",
        ),
        career_info=CareerInfo(
            goals=[
                Goal(id="g1", description="Learn machine learning", type=GoalType.SHORT_TERM, priority=2),
                Goal(id="g2", description="Become a data scientist", type=GoalType.LONG_TERM, priority=1),
            ],
            interests=["data analytics", "machine learning"],
            struggles=[
                Challenge(
                    type=ChallengeType.DIRECTION,
                    description="I feel lost about my direction",
                    severity=6,
                )
            ],
        ),
        skills=SkillSet(
            current=[
                Skill(name="python", level=8, category="technical"),
                Skill(name="sql", level=5, category="technical"),
                Skill(name="communication", level=6, category="soft"),
            ],
            learning=[Skill(name="statistics", level=2, category="technical")],
        ),
        mindset=Mindset(confidence_level=0.6, motivation_level=0.8),
    )


@pytest.fixture
def data_science_path() -> CareerPath:
    return CareerPath(
        id="path-data-science",
        title="Data Science",
        description="Analyze data and build predictive models",
        reasoning="Matches your interest in data.",
        fit_score=0.8,
        required_skills=["statistics", "python", "machine learning", "data visualization"],
        time_to_transition="6-12 months",
        growth_potential=0.9,
    )

"""
Action Step Generation

Creates small, time-bound tasks for a user's goals. Each goal yields up to
one step per timeframe (today, this week, this month); the category of each
step follows the goal's wording and the user's struggles.

With several goals the steps are interleaved round-robin, so the first
entries of the list touch every goal before any goal gets a second step,
and each timeframe is capped to keep the list manageable.
"""

import calendar
import uuid
from datetime import datetime, timedelta
from typing import Optional

from ..models.core import (
    ActionCategory,
    ActionStep,
    CareerPath,
    ChallengeType,
    Goal,
    GoalType,
    Timeframe,
    UserProfile,
    utc_now,
)
from ..models.recommendations import SkillRecommendation

ALL_CATEGORIES = (
    ActionCategory.LEARNING,
    ActionCategory.NETWORKING,
    ActionCategory.APPLICATION,
    ActionCategory.REFLECTION,
)

TIMEFRAME_ORDER = (Timeframe.TODAY, Timeframe.THIS_WEEK, Timeframe.THIS_MONTH)

PREFERRED_CATEGORIES: dict[Timeframe, tuple[ActionCategory, ...]] = {
    Timeframe.TODAY: (ActionCategory.REFLECTION, ActionCategory.APPLICATION),
    Timeframe.THIS_WEEK: (ActionCategory.NETWORKING, ActionCategory.APPLICATION),
    Timeframe.THIS_MONTH: (ActionCategory.LEARNING,),
}

LEARNING_WORDS = ("learn", "skill")
NETWORKING_WORDS = ("network", "connect", "mentor")
APPLICATION_WORDS = ("apply", "job", "project")
REFLECTION_WORDS = ("clarity", "explore")

MAX_STEPS_PER_TIMEFRAME = 3
MAX_STEPS_PER_TIMEFRAME_BUSY = 2
BUSY_GOAL_COUNT = 2

GENERIC_REFLECTION_STEP = (
    "Reflect on your goals: write down what you want your work life to look "
    "like in 6 months"
)


def _new_step_id() -> str:
    return f"step-{uuid.uuid4().hex[:12]}"


def calculate_due_date(timeframe: Timeframe, now: Optional[datetime] = None) -> datetime:
    """End of today, end of the coming Sunday, or end of the current month."""
    now = now or utc_now()
    end_of_day = dict(hour=23, minute=59, second=59, microsecond=999999)

    if timeframe == Timeframe.TODAY:
        return now.replace(**end_of_day)
    if timeframe == Timeframe.THIS_WEEK:
        # Sunday counts as the start of a new week
        days_until_sunday = 7 - (now.weekday() + 1) % 7
        return (now + timedelta(days=days_until_sunday)).replace(**end_of_day)
    last_day = calendar.monthrange(now.year, now.month)[1]
    return now.replace(day=last_day, **end_of_day)


def prioritize_goals(goals: list[Goal]) -> list[Goal]:
    """Higher priority first, then short-term before long-term, then earliest deadline."""

    def key(goal: Goal) -> tuple:
        deadline = goal.target_date.timestamp() if goal.target_date else float("inf")
        return (-goal.priority, goal.type != GoalType.SHORT_TERM, deadline)

    return sorted(goals, key=key)


def determine_categories(goal: Goal, profile: Optional[UserProfile] = None) -> list[ActionCategory]:
    text = goal.description.lower()
    struggle_types = {c.type for c in profile.career_info.struggles} if profile else set()
    categories: list[ActionCategory] = []

    if any(w in text for w in LEARNING_WORDS) or ChallengeType.SKILLS in struggle_types:
        categories.append(ActionCategory.LEARNING)
    if any(w in text for w in NETWORKING_WORDS):
        categories.append(ActionCategory.NETWORKING)
    if any(w in text for w in APPLICATION_WORDS) or goal.type == GoalType.SHORT_TERM:
        categories.append(ActionCategory.APPLICATION)
    if (
        struggle_types & {ChallengeType.DIRECTION, ChallengeType.CONFIDENCE}
        or any(w in text for w in REFLECTION_WORDS)
    ):
        categories.append(ActionCategory.REFLECTION)

    return categories or list(ALL_CATEGORIES)


def select_category(timeframe: Timeframe, categories: list[ActionCategory]) -> ActionCategory:
    for preferred in PREFERRED_CATEGORIES[timeframe]:
        if preferred in categories:
            return preferred
    return categories[0]


def describe_step(
    timeframe: Timeframe,
    category: ActionCategory,
    goal: Goal,
    career_path: Optional[CareerPath] = None,
    skill_recommendations: Optional[list[SkillRecommendation]] = None,
) -> str:
    goal_text = goal.description

    if category == ActionCategory.LEARNING:
        if skill_recommendations:
            skill = skill_recommendations[0].skill
            return {
                Timeframe.TODAY: f"Research learning resources for {skill}",
                Timeframe.THIS_WEEK: f"Complete an introductory tutorial or course module on {skill}",
                Timeframe.THIS_MONTH: f"Dedicate 10 hours to learning {skill} through structured practice",
            }[timeframe]
        return {
            Timeframe.TODAY: "Identify one skill to focus on this week",
            Timeframe.THIS_WEEK: "Complete 2 hours of focused learning on your target skill",
            Timeframe.THIS_MONTH: "Complete a full online course or certification",
        }[timeframe]

    if category == ActionCategory.NETWORKING:
        if career_path:
            title = career_path.title
            return {
                Timeframe.TODAY: f"Identify 3 professionals in {title} to connect with on LinkedIn",
                Timeframe.THIS_WEEK: f"Reach out to 2 people working in {title} for informational interviews",
                Timeframe.THIS_MONTH: f"Attend a virtual or in-person event related to {title}",
            }[timeframe]
        return {
            Timeframe.TODAY: "Identify 3 people to connect with on LinkedIn",
            Timeframe.THIS_WEEK: "Reach out to 2 professionals for informational interviews",
            Timeframe.THIS_MONTH: "Conduct 3 informational interviews",
        }[timeframe]

    if category == ActionCategory.APPLICATION:
        return {
            Timeframe.TODAY: f"Update your resume to highlight relevant experience for {goal_text}",
            Timeframe.THIS_WEEK: f"Apply to 3 opportunities aligned with {goal_text}",
            Timeframe.THIS_MONTH: f"Complete a portfolio project that demonstrates skills for {goal_text}",
        }[timeframe]

    return {
        Timeframe.TODAY: f"Write down 3 specific outcomes you want from {goal_text}",
        Timeframe.THIS_WEEK: f"Reflect on your strengths and how they align with {goal_text}",
        Timeframe.THIS_MONTH: (
            "Create a vision document outlining where you want to be in 6 months "
            f"regarding {goal_text}"
        ),
    }[timeframe]


def create_action_steps(
    goal: Goal,
    timeframe: Optional[Timeframe] = None,
    profile: Optional[UserProfile] = None,
    career_path: Optional[CareerPath] = None,
    skill_recommendations: Optional[list[SkillRecommendation]] = None,
    now: Optional[datetime] = None,
) -> list[ActionStep]:
    """
    Create the steps for one goal.

    Args:
        goal: Goal the steps serve; each step carries its id
        timeframe: Restrict to a single timeframe (default: all three)
        profile: Used to read struggles that shape the categories
        career_path: Names the field in networking steps
        skill_recommendations: The first entry names the skill in learning steps
        now: Reference time for due dates

    Returns:
        At least one step
    """
    categories = determine_categories(goal, profile)
    timeframes = (timeframe,) if timeframe else TIMEFRAME_ORDER

    steps = []
    for tf in timeframes:
        category = select_category(tf, categories)
        steps.append(
            ActionStep(
                id=_new_step_id(),
                description=describe_step(tf, category, goal, career_path, skill_recommendations),
                timeframe=tf,
                category=category,
                due_date=calculate_due_date(tf, now),
                goal_id=goal.id,
            )
        )
    return steps


def _reflection(description: str, timeframe: Timeframe, now: Optional[datetime]) -> ActionStep:
    return ActionStep(
        id=_new_step_id(),
        description=description,
        timeframe=timeframe,
        category=ActionCategory.REFLECTION,
        due_date=calculate_due_date(timeframe, now),
    )


def reflection_step(now: Optional[datetime] = None) -> ActionStep:
    """The step offered when nothing more specific can be generated."""
    return _reflection(GENERIC_REFLECTION_STEP, Timeframe.TODAY, now)


def mindset_steps(now: Optional[datetime] = None) -> list[ActionStep]:
    """Small reflection steps offered alongside mindset support."""
    return [
        _reflection(
            "Write down three things you've accomplished recently, no matter how small",
            Timeframe.TODAY,
            now,
        ),
        _reflection(
            "Identify one challenge you're facing and reframe it as a learning opportunity",
            Timeframe.THIS_WEEK,
            now,
        ),
    ]


PROFILE_FIELD_STEPS = {
    "goals": "Define your short-term and long-term career goals",
    "interests": "List your professional interests and what energizes you at work",
    "struggles": "Note the one career challenge that's been on your mind the most",
}


def profile_building_steps(
    missing_fields: list[str], now: Optional[datetime] = None
) -> list[ActionStep]:
    """Reflection steps that fill the gaps of an incomplete profile."""
    return [
        _reflection(PROFILE_FIELD_STEPS[name], Timeframe.TODAY, now)
        for name in missing_fields
        if name in PROFILE_FIELD_STEPS
    ]


def balance_timeframes(steps: list[ActionStep], active_goal_count: int) -> list[ActionStep]:
    """Cap steps per timeframe (2 with more than two goals, else 3), keeping order."""
    cap = (
        MAX_STEPS_PER_TIMEFRAME_BUSY
        if active_goal_count > BUSY_GOAL_COUNT
        else MAX_STEPS_PER_TIMEFRAME
    )
    counts: dict[Timeframe, int] = {}
    balanced = []
    for step in steps:
        if counts.get(step.timeframe, 0) < cap:
            counts[step.timeframe] = counts.get(step.timeframe, 0) + 1
            balanced.append(step)
    return balanced


def create_action_steps_for_goals(
    goals: list[Goal],
    profile: Optional[UserProfile] = None,
    career_path: Optional[CareerPath] = None,
    skill_recommendations: Optional[list[SkillRecommendation]] = None,
    now: Optional[datetime] = None,
) -> list[ActionStep]:
    """
    Steps for every goal, interleaved round-robin and balanced per timeframe.

    With no goals the result is the single generic reflection step.
    """
    if not goals:
        return [reflection_step(now)]

    per_goal = [
        create_action_steps(
            goal,
            profile=profile,
            career_path=career_path,
            skill_recommendations=skill_recommendations,
            now=now,
        )
        for goal in prioritize_goals(goals)
    ]

    interleaved: list[ActionStep] = []
    for round_index in range(max(len(steps) for steps in per_goal)):
        for steps in per_goal:
            if round_index < len(steps):
                interleaved.append(steps[round_index])

    return balance_timeframes(interleaved, len(goals)) or [reflection_step(now)]


def generate_progress_acknowledgment(
    completed_steps: list[ActionStep], previously_completed: int = 0
) -> str:
    """
    Encouraging summary of newly completed steps.

    Args:
        completed_steps: Steps just completed
        previously_completed: Completed actions already on the profile

    Returns:
        The message, or "" when nothing was completed
    """
    if not completed_steps:
        return ""

    parts: list[str] = []
    if len(completed_steps) == 1:
        parts.append(f'Great work completing "{completed_steps[0].description}"!')
    else:
        parts.append(f"Excellent progress! You've completed {len(completed_steps)} action steps.")

    categories = {step.category for step in completed_steps}
    if ActionCategory.LEARNING in categories:
        parts.append("You're building valuable skills through your learning efforts.")
    if ActionCategory.NETWORKING in categories:
        parts.append("Your networking activities are expanding your professional connections.")
    if ActionCategory.APPLICATION in categories:
        parts.append("You're taking concrete steps toward your career goals.")
    if ActionCategory.REFLECTION in categories:
        parts.append("Your reflection work is helping you gain clarity on your path.")

    total = previously_completed + len(completed_steps)
    if total >= 10:
        parts.append(f"You've completed {total} total actions - you're building real momentum!")
    elif total >= 5:
        parts.append(f"You're building momentum with {total} completed actions.")

    return " ".join(parts)

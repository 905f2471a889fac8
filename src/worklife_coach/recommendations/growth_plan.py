"""
Growth Plan Builder

Builds a phased plan toward a career path. The number of phases follows the
path's transition time:

    <= 6 months   Foundation, Execution
    <= 12 months  Foundation, Development, Advancement
    longer        Foundation, Skill Building, Application, Mastery

Each phase has objectives that reference the career path, and every phase
action references one of its phase's objectives. Milestone target dates
are clamped into [created_at + 3 months, created_at + 12 months].

Example Usage:
    plan = build_growth_plan(profile, career_path)
    assert validate_growth_plan_timeline(plan)
    plan = adapt_growth_plan(plan, updated_profile)
"""

import calendar
import math
import uuid
from datetime import datetime
from typing import Optional

import structlog

from ..models.core import (
    ActionCategory,
    ActionStep,
    CareerPath,
    Milestone,
    Timeframe,
    UserProfile,
    utc_now,
)
from ..models.recommendations import GrowthPlan, Phase, PhaseObjective
from .career_paths import parse_timeline_months, slugify

logger = structlog.get_logger(__name__)

MIN_MILESTONE_MONTHS = 3
MAX_MILESTONE_MONTHS = 12
OVERDUE_PUSH_MONTHS = 3

# (name, start month, end month)
SHORT_LAYOUT = (("Foundation", 0, 3), ("Execution", 3, 6))
MEDIUM_LAYOUT = (("Foundation", 0, 4), ("Development", 4, 8), ("Advancement", 8, 12))
LONG_LAYOUT = (
    ("Foundation", 0, 6),
    ("Skill Building", 6, 12),
    ("Application", 12, 18),
    ("Mastery", 18, 24),
)


def add_months(moment: datetime, months: int) -> datetime:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def milestone_window(created_at: datetime) -> tuple[datetime, datetime]:
    return (
        add_months(created_at, MIN_MILESTONE_MONTHS),
        add_months(created_at, MAX_MILESTONE_MONTHS),
    )


def clamp_to_window(target: datetime, created_at: datetime) -> datetime:
    earliest, latest = milestone_window(created_at)
    return min(max(target, earliest), latest)


def phase_layout(timeline: str) -> tuple[tuple[str, int, int], ...]:
    months = parse_timeline_months(timeline)
    if months <= 6:
        return SHORT_LAYOUT
    if months <= 12:
        return MEDIUM_LAYOUT
    return LONG_LAYOUT


def phase_objective_texts(phase_name: str, career_path: CareerPath) -> list[str]:
    name = phase_name.lower()
    if "foundation" in name:
        return [
            f"Build foundational knowledge in {career_path.title}",
            "Establish learning routine and habits",
            "Connect with professionals in the field",
        ]
    if "development" in name or "skill" in name:
        return [
            "Develop core technical skills",
            "Complete practical projects",
            "Build portfolio of work",
        ]
    if "execution" in name or "application" in name:
        return [
            "Apply skills in real-world scenarios",
            "Gain practical experience",
            "Demonstrate competency to potential employers",
        ]
    return [
        "Achieve proficiency in key skills",
        f"Transition into {career_path.title}",
        "Establish yourself in the new career path",
    ]


def phase_skills(
    phase_index: int, phase_count: int, required_skills: list[str]
) -> list[str]:
    """Even, ordered share of the required skills for one phase; every skill
    lands in exactly one phase."""
    count = len(required_skills)
    start = math.ceil(phase_index * count / phase_count)
    end = math.ceil((phase_index + 1) * count / phase_count)
    return required_skills[start:end]


def build_growth_plan(
    profile: UserProfile, career_path: CareerPath, now: Optional[datetime] = None
) -> GrowthPlan:
    """
    Build a growth plan for a career path.

    Args:
        profile: Profile snapshot (owner of the plan)
        career_path: Target path; its transition time selects the phase layout
        now: Creation time (default: current UTC time)
    """
    created_at = now or utc_now()
    plan_id = f"plan-{slugify(career_path.id)}-{uuid.uuid4().hex[:8]}"

    layout = phase_layout(career_path.time_to_transition)
    phases = [
        _build_phase(plan_id, index, len(layout), name, start, end, career_path, created_at)
        for index, (name, start, end) in enumerate(layout)
    ]
    milestones = [
        Milestone(
            id=f"{plan_id}-milestone-{index}",
            title=f"Complete {phase.name} Phase",
            description=(
                f"Successfully complete all objectives in the {phase.name} phase: "
                + ", ".join(o.description for o in phase.objectives)
            ),
            target_date=clamp_to_window(add_months(created_at, phase.end_month), created_at),
        )
        for index, phase in enumerate(phases)
    ]

    logger.debug(
        "growth_plan_built",
        user_id=profile.user_id,
        career_path=career_path.id,
        phases=len(phases),
    )
    return GrowthPlan(
        id=plan_id,
        user_id=profile.user_id,
        career_path=career_path,
        timeline=career_path.time_to_transition,
        phases=phases,
        milestones=milestones,
        created_at=created_at,
        last_updated=created_at,
    )


def adapt_growth_plan(
    plan: GrowthPlan, profile: UserProfile, now: Optional[datetime] = None
) -> GrowthPlan:
    """
    Refresh a plan from the user's recorded progress.

    Milestones completed on the profile are marked complete, overdue open
    milestones move three months out (still inside the plan's window), and
    phase actions pick up completion from the profile's completed actions.
    """
    now = now or utc_now()
    completed_ids = {m.id for m in profile.progress.milestones if m.completed}
    completed_actions = set(profile.progress.completed_actions)

    milestones: list[Milestone] = []
    for milestone in plan.milestones:
        updated = milestone.model_copy()
        if milestone.id in completed_ids and not milestone.completed:
            updated.completed = True
            updated.completed_date = now
        if not updated.completed and updated.target_date < now:
            updated.target_date = clamp_to_window(
                add_months(now, OVERDUE_PUSH_MONTHS), plan.created_at
            )
        milestones.append(updated)

    phases = [
        phase.model_copy(
            update={
                "actions": [
                    action.model_copy(update={"completed": action.id in completed_actions})
                    for action in phase.actions
                ]
            }
        )
        for phase in plan.phases
    ]
    return plan.model_copy(
        update={"milestones": milestones, "phases": phases, "last_updated": now}
    )


def validate_growth_plan_timeline(plan: GrowthPlan) -> bool:
    """True when every milestone lies within 3 to 12 months of plan creation."""
    earliest, latest = milestone_window(plan.created_at)
    return all(earliest <= m.target_date <= latest for m in plan.milestones)


def validate_action_objective_linkage(plan: GrowthPlan) -> bool:
    """True when each action names an objective of its phase and each
    objective names the plan's career path."""
    for phase in plan.phases:
        objective_ids = {o.id for o in phase.objectives}
        if any(o.career_path_id != plan.career_path.id for o in phase.objectives):
            return False
        if any(a.objective_id not in objective_ids for a in phase.actions):
            return False
    return True


def _build_phase(
    plan_id: str,
    phase_index: int,
    phase_count: int,
    name: str,
    start_month: int,
    end_month: int,
    career_path: CareerPath,
    created_at: datetime,
) -> Phase:
    objectives = [
        PhaseObjective(
            id=f"{plan_id}-p{phase_index}-o{index}",
            description=text,
            career_path_id=career_path.id,
        )
        for index, text in enumerate(phase_objective_texts(name, career_path))
    ]
    skills = phase_skills(phase_index, phase_count, list(career_path.required_skills))

    actions = [
        _phase_action(
            f"{plan_id}-p{phase_index}-a{index}",
            objective.description,
            objective.id,
            add_months(created_at, start_month + index),
        )
        for index, objective in enumerate(objectives)
    ]
    # Skill practice is spread over the phase's objectives
    actions.extend(
        _phase_action(
            f"{plan_id}-p{phase_index}-s{index}",
            f"Learn and practice {skill}",
            objectives[index % len(objectives)].id,
            add_months(created_at, start_month + index // 2),
        )
        for index, skill in enumerate(skills)
    )

    return Phase(
        name=name,
        duration=f"{start_month}-{end_month} months",
        start_month=start_month,
        end_month=end_month,
        objectives=objectives,
        skills=skills,
        actions=actions,
    )


def _phase_action(
    action_id: str, description: str, objective_id: str, due: datetime
) -> ActionStep:
    return ActionStep(
        id=action_id,
        description=description,
        timeframe=Timeframe.THIS_MONTH,
        category=ActionCategory.LEARNING,
        due_date=due,
        objective_id=objective_id,
    )

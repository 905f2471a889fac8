"""
Career Transition Advice

Plans a move from one field to another: which current skills carry over,
which core skills of the target field are missing, how hard and how long the
move is, the phases to go through, and the main risks and success factors.

Difficulty score (in [0, 1]):
    0.3 * (1 - average transferability of carried-over skills)
  + 0.4 * missing core skills / target core skill count
  + 0.3 * (1 - shared core skills / target core skill count)
Below 0.4 is easy, below 0.7 moderate, otherwise challenging.

Duration in months:
    round((base + min(2 * missing skills, 12)) * experience multiplier)
with base 6 / 12 / 18 by difficulty and a multiplier of 0.8 from five years
of experience, 0.9 from three. For the same profile and target field the
estimate never decreases as difficulty rises.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from ..models.core import ActionCategory, ActionStep, Timeframe, UserProfile
from ..models.recommendations import (
    DifficultyLevel,
    SkillRecommendation,
    TransitionPhase,
    TransitionPlan,
)
from ..profile.analyzer import PROFICIENT_LEVEL
from .catalog import UNIVERSAL_SKILLS, FieldProfile, get_field_profile, get_skill_info
from .skills import estimate_skill_time, order_by_dependencies, score_priority

logger = structlog.get_logger(__name__)

BASE_MONTHS = {
    DifficultyLevel.EASY: 6,
    DifficultyLevel.MODERATE: 12,
    DifficultyLevel.CHALLENGING: 18,
}
MAX_SKILL_ADJUSTMENT_MONTHS = 12
EASY_THRESHOLD = 0.4
MODERATE_THRESHOLD = 0.7
HIGH_TRANSFERABILITY = 0.7
LARGE_SKILL_GAP = 5

GENERAL_SUCCESS_FACTORS = (
    "Networking and building relationships in target field",
    "Demonstrating passion and commitment through projects and learning",
    "Leveraging unique perspective from previous field",
)


@dataclass(frozen=True)
class TransferableSkill:
    skill: str
    transferability: float
    relevance: float

    @property
    def combined(self) -> float:
        return (self.transferability + self.relevance) / 2


def _overlaps(a: str, b: str) -> bool:
    a, b = a.lower(), b.lower()
    return a == b or a in b or b in a


def identify_transferable_skills(
    profile: UserProfile, source: FieldProfile, target: FieldProfile
) -> list[TransferableSkill]:
    """
    Current skills that are relevant to the target field, strongest first.

    Target-field core skills transfer fully, general skills such as
    communication transfer well, and skills specific to the source field are
    only kept when the user holds them at a high level.
    """
    transferable: list[TransferableSkill] = []
    for skill in profile.skills.current:
        name = skill.name
        if any(_overlaps(name, core) for core in target.core_skills):
            transferability, relevance = 1.0, 1.0
        elif any(_overlaps(name, universal) for universal in UNIVERSAL_SKILLS):
            transferability, relevance = 0.9, 0.7
        elif any(_overlaps(name, core) for core in source.core_skills):
            transferability, relevance = 0.3, 0.4
        else:
            transferability, relevance = 0.6, 0.5

        transferability *= min(skill.level / 5, 1.0)
        if transferability > 0.3 or relevance > 0.4:
            transferable.append(TransferableSkill(name, round(transferability, 4), relevance))

    transferable.sort(key=lambda s: s.combined, reverse=True)
    return transferable


def identify_skills_to_acquire(
    profile: UserProfile, target: FieldProfile
) -> list[SkillRecommendation]:
    """Target core skills the user does not hold, ordered prerequisites first."""
    missing = [
        core
        for core in target.core_skills
        if not any(_overlaps(s.name, core) for s in profile.skills.current)
    ]

    recommendations = []
    for skill in missing:
        info = get_skill_info(skill)
        recommendations.append(
            SkillRecommendation(
                skill=skill,
                priority=score_priority(info, PROFICIENT_LEVEL),
                reasoning=(
                    f"{skill} is a core skill for {target.name} "
                    "and essential for successful transition"
                ),
                learning_resources=list(info.resources),
                estimated_time=estimate_skill_time(PROFICIENT_LEVEL, info.learning_months),
                dependencies=list(info.dependencies),
            )
        )
    return order_by_dependencies(recommendations)


def average_transferability(skills: list[TransferableSkill]) -> float:
    if not skills:
        return 0.0
    return sum(s.transferability for s in skills) / len(skills)


def assess_difficulty(
    transferable: list[TransferableSkill],
    missing_count: int,
    source: FieldProfile,
    target: FieldProfile,
) -> DifficultyLevel:
    core_count = max(len(target.core_skills), 1)
    shared = sum(
        1 for s in source.core_skills if any(_overlaps(s, t) for t in target.core_skills)
    )
    score = (
        (1 - average_transferability(transferable)) * 0.3
        + (missing_count / core_count) * 0.4
        + (1 - shared / core_count) * 0.3
    )
    if score < EASY_THRESHOLD:
        return DifficultyLevel.EASY
    if score < MODERATE_THRESHOLD:
        return DifficultyLevel.MODERATE
    return DifficultyLevel.CHALLENGING


def estimate_transition_months(
    difficulty: DifficultyLevel, missing_count: int, years_of_experience: float
) -> int:
    total = BASE_MONTHS[difficulty] + min(missing_count * 2, MAX_SKILL_ADJUSTMENT_MONTHS)
    if years_of_experience >= 5:
        multiplier = 0.8
    elif years_of_experience >= 3:
        multiplier = 0.9
    else:
        multiplier = 1.0
    return round(total * multiplier)


def format_duration(months: int) -> str:
    return f"{max(months - 3, 3)}-{months + 3} months"


def build_transition_phases(
    difficulty: DifficultyLevel, skills_to_acquire: list[SkillRecommendation]
) -> list[TransitionPhase]:
    """One phase for easy moves, two for moderate, three for challenging ones."""
    if difficulty == DifficultyLevel.EASY:
        return [
            TransitionPhase(
                name="Skill Development and Transition",
                duration="3-6 months",
                focus="Acquire core skills and begin applying to target roles",
                actions=_early_actions(skills_to_acquire, "single"),
                success_criteria=[
                    "Complete learning for core skills",
                    "Build portfolio projects demonstrating new skills",
                    "Network with professionals in target field",
                    "Apply to entry-level positions in target field",
                ],
            )
        ]
    if difficulty == DifficultyLevel.MODERATE:
        return [
            TransitionPhase(
                name="Foundation Building",
                duration="4-6 months",
                focus="Learn fundamental skills required for target field",
                actions=_early_actions(skills_to_acquire, "foundation"),
                success_criteria=[
                    "Complete foundational skill training",
                    "Build 2-3 portfolio projects",
                    "Join relevant professional communities",
                    "Identify potential mentors in target field",
                ],
            ),
            TransitionPhase(
                name="Transition and Application",
                duration="4-6 months",
                focus="Apply skills and actively pursue opportunities",
                actions=_late_actions("application"),
                success_criteria=[
                    "Complete advanced skill development",
                    "Build comprehensive portfolio",
                    "Conduct informational interviews",
                    "Apply to target roles and secure interviews",
                ],
            ),
        ]
    return [
        TransitionPhase(
            name="Exploration and Foundation",
            duration="4-6 months",
            focus="Understand target field and build foundational knowledge",
            actions=_early_actions(skills_to_acquire, "exploration"),
            success_criteria=[
                "Complete introductory courses in target field",
                "Understand industry landscape and key players",
                "Identify specific role targets within field",
                "Begin building foundational skills",
            ],
        ),
        TransitionPhase(
            name="Skill Development",
            duration="6-9 months",
            focus="Intensive skill building and practical application",
            actions=_development_actions(),
            success_criteria=[
                "Achieve proficiency in core technical skills",
                "Complete multiple portfolio projects",
                "Contribute to open source or volunteer projects",
                "Build network in target field",
            ],
        ),
        TransitionPhase(
            name="Transition Execution",
            duration="3-6 months",
            focus="Active job search and transition to new role",
            actions=_late_actions("execution"),
            success_criteria=[
                "Polish portfolio and professional materials",
                "Conduct targeted job search",
                "Leverage network for opportunities",
                "Successfully transition to new role",
            ],
        ),
    ]


def identify_risks(
    difficulty: DifficultyLevel,
    transferable: list[TransferableSkill],
    missing_count: int,
    profile: UserProfile,
) -> list[str]:
    risks: list[str] = []
    if difficulty == DifficultyLevel.CHALLENGING:
        risks.append("Significant time investment required (18+ months)")
        risks.append("May need to accept entry-level position despite experience")
    elif difficulty == DifficultyLevel.MODERATE:
        risks.append("Moderate time commitment (12+ months) required")

    if missing_count >= LARGE_SKILL_GAP:
        risks.append("Large skill gap requires substantial learning effort")
    if average_transferability(transferable) < 0.5:
        risks.append("Limited skill transferability may require starting from basics")
    if profile.personal_info.years_of_experience < 2:
        risks.append("Limited work experience may make transition more challenging")

    risks.append("Potential salary reduction during transition period")
    risks.append("Competitive job market for career changers")
    return risks


def identify_success_factors(
    transferable: list[TransferableSkill], profile: UserProfile
) -> list[str]:
    factors: list[str] = []
    strong = [s.skill for s in transferable if s.transferability >= HIGH_TRANSFERABILITY]
    if strong:
        factors.append(f"Strong transferable skills: {', '.join(strong[:3])}")
    if profile.personal_info.years_of_experience >= 3:
        factors.append("Solid work experience demonstrates professionalism and work ethic")
    if profile.mindset.motivation_level >= 0.7:
        factors.append("High motivation level supports sustained learning effort")
    if profile.career_info.goals:
        factors.append("Clear goals provide direction and focus")
    factors.extend(GENERAL_SUCCESS_FACTORS)
    return factors


def provide_transition_guidance(
    source_field: Optional[str], target_field: str, profile: UserProfile
) -> TransitionPlan:
    """
    Build a transition plan from source_field to target_field.

    Args:
        source_field: Current field; falls back to the profile's industry or
            current role when empty
        target_field: Field the user wants to move into
        profile: Profile snapshot
    """
    source_name = (
        source_field
        or profile.personal_info.industry
        or profile.personal_info.current_role
        or "current field"
    )
    source = get_field_profile(source_name)
    target = get_field_profile(target_field)

    transferable = identify_transferable_skills(profile, source, target)
    skills_to_acquire = identify_skills_to_acquire(profile, target)
    difficulty = assess_difficulty(transferable, len(skills_to_acquire), source, target)
    months = estimate_transition_months(
        difficulty, len(skills_to_acquire), profile.personal_info.years_of_experience
    )

    logger.debug(
        "transition_plan_built",
        source_field=source.name,
        target_field=target.name,
        difficulty=difficulty.value,
        months=months,
    )
    return TransitionPlan(
        source_field=source_name,
        target_field=target_field,
        transferable_skills=[s.skill for s in transferable],
        skills_to_acquire=skills_to_acquire,
        phases=build_transition_phases(difficulty, skills_to_acquire),
        estimated_duration=format_duration(months),
        estimated_months=months,
        difficulty_level=difficulty,
        risks=identify_risks(difficulty, transferable, len(skills_to_acquire), profile),
        success_factors=identify_success_factors(transferable, profile),
    )


def _action(
    action_id: str, description: str, timeframe: Timeframe, category: ActionCategory
) -> ActionStep:
    return ActionStep(
        id=f"transition-{action_id}",
        description=description,
        timeframe=timeframe,
        category=category,
    )


def _early_actions(
    skills_to_acquire: list[SkillRecommendation], phase: str
) -> list[ActionStep]:
    actions = []
    if skills_to_acquire:
        actions.append(
            _action(
                f"{phase}-learn",
                f"Begin learning {skills_to_acquire[0].skill}",
                Timeframe.THIS_WEEK,
                ActionCategory.LEARNING,
            )
        )
    actions.append(
        _action(
            f"{phase}-research",
            "Research target field and identify key companies",
            Timeframe.THIS_WEEK,
            ActionCategory.REFLECTION,
        )
    )
    actions.append(
        _action(
            f"{phase}-communities",
            "Join online communities in target field",
            Timeframe.THIS_MONTH,
            ActionCategory.NETWORKING,
        )
    )
    return actions


def _development_actions() -> list[ActionStep]:
    return [
        _action(
            "development-courses",
            "Complete intermediate skill courses",
            Timeframe.THIS_MONTH,
            ActionCategory.LEARNING,
        ),
        _action(
            "development-portfolio",
            "Build portfolio project showcasing new skills",
            Timeframe.THIS_MONTH,
            ActionCategory.APPLICATION,
        ),
        _action(
            "development-events",
            "Attend industry events or webinars",
            Timeframe.THIS_MONTH,
            ActionCategory.NETWORKING,
        ),
    ]


def _late_actions(phase: str) -> list[ActionStep]:
    return [
        _action(
            f"{phase}-resume",
            "Update resume highlighting transferable skills",
            Timeframe.THIS_WEEK,
            ActionCategory.APPLICATION,
        ),
        _action(
            f"{phase}-interviews",
            "Conduct informational interviews with target field professionals",
            Timeframe.THIS_MONTH,
            ActionCategory.NETWORKING,
        ),
        _action(
            f"{phase}-apply",
            "Apply to entry-level or transition roles",
            Timeframe.THIS_MONTH,
            ActionCategory.APPLICATION,
        ),
    ]

"""
Skill Recommendations

Turns the skill gaps between a profile and a career path into an ordered
learning list.

Priority (in [0, 1]):
    0.4 * impact
  + 0.3 * gap size / 10
  + 0.2 * (1 - min(learning months / 12, 1))
  + 0.1 * (1 - min(prerequisite count / 5, 1))

Ordering is greedy over a dependency graph: at each step the highest-ranked
skill whose prerequisites are already placed is emitted, ranking by priority,
then gap size, then position in the career path's required skills. So the
list is as close to descending priority as prerequisites allow, and every
skill appears after the skills named in its `dependencies`.

Prerequisites outside the recommended set are dropped from `dependencies`
(they are already known or not part of this path). A prerequisite cycle is
broken by emitting the highest-ranked remaining skill and dropping its
unplaced prerequisites.
"""

import math
from typing import Optional

from ..models.core import CareerPath, UserProfile
from ..models.recommendations import SkillRecommendation
from ..profile.analyzer import ProfileAnalyzer
from .catalog import SkillInfo, get_skill_info

IMPACT_WEIGHT = 0.4
GAP_WEIGHT = 0.3
SPEED_WEIGHT = 0.2
INDEPENDENCE_WEIGHT = 0.1


def score_priority(info: SkillInfo, gap_size: int) -> float:
    speed = 1 - min(info.learning_months / 12, 1.0)
    independence = 1 - min(len(info.dependencies) / 5, 1.0)
    score = (
        info.impact * IMPACT_WEIGHT
        + (gap_size / 10) * GAP_WEIGHT
        + speed * SPEED_WEIGHT
        + independence * INDEPENDENCE_WEIGHT
    )
    return round(min(max(score, 0.0), 1.0), 4)


def estimate_skill_time(gap_size: int, base_months: int) -> str:
    """Scale the catalog learning time by how much of a 5-level climb remains."""
    months = math.ceil((gap_size / 5) * base_months)
    if months <= 1:
        return "2-4 weeks"
    if months <= 6:
        return f"{months} months"
    return f"{months}-{months + 3} months"


def order_by_dependencies(
    recommendations: list[SkillRecommendation],
    gap_sizes: Optional[dict[str, int]] = None,
) -> list[SkillRecommendation]:
    """
    Order recommendations so prerequisites come first.

    Args:
        recommendations: Entries whose `dependencies` hold raw prerequisite names
        gap_sizes: Optional gap size per lowercase skill name, used as the
            second tie-breaker

    Returns:
        New recommendation objects, dependency-consistent, with
        `dependencies` pruned to skills that appear earlier in the list
    """
    gap_sizes = gap_sizes or {}
    names = {r.skill.lower() for r in recommendations}

    pending: list[tuple[int, SkillRecommendation, list[str]]] = []
    for position, rec in enumerate(recommendations):
        deps = [
            d
            for d in dict.fromkeys(rec.dependencies)
            if d.lower() in names and d.lower() != rec.skill.lower()
        ]
        pending.append((position, rec, deps))

    def rank(entry: tuple[int, SkillRecommendation, list[str]]) -> tuple:
        position, rec, _ = entry
        return (rec.priority, gap_sizes.get(rec.skill.lower(), 0), -position)

    placed: set[str] = set()
    ordered: list[SkillRecommendation] = []
    while pending:
        ready = [e for e in pending if all(d.lower() in placed for d in e[2])]
        # Empty ready set means every remaining skill sits on a cycle
        chosen = max(ready or pending, key=rank)
        position, rec, deps = chosen
        kept = [d for d in deps if d.lower() in placed]
        ordered.append(rec.model_copy(update={"dependencies": kept}))
        placed.add(rec.skill.lower())
        pending.remove(chosen)
    return ordered


def recommend_skills(
    profile: UserProfile,
    career_path: CareerPath,
    analyzer: Optional[ProfileAnalyzer] = None,
    limit: Optional[int] = None,
) -> list[SkillRecommendation]:
    """
    Recommend skills for a career path, ordered as described in the module docs.

    Args:
        profile: Profile snapshot
        career_path: Target path whose required skills define the gaps
        analyzer: Gap source (default: a new ProfileAnalyzer)
        limit: Keep a dependency-closed prefix of at most this many entries
    """
    analyzer = analyzer or ProfileAnalyzer()
    gaps = analyzer.identify_gaps(profile, career_path)

    recommendations: list[SkillRecommendation] = []
    gap_sizes: dict[str, int] = {}
    for gap in gaps:
        key = gap.skill.lower()
        if key in gap_sizes:
            continue
        info = get_skill_info(gap.skill)
        gap_sizes[key] = gap.size
        recommendations.append(
            SkillRecommendation(
                skill=gap.skill,
                priority=score_priority(info, gap.size),
                reasoning=_reasoning(gap.skill, gap.size, info, career_path),
                learning_resources=list(info.resources),
                estimated_time=estimate_skill_time(gap.size, info.learning_months),
                dependencies=list(info.dependencies),
            )
        )

    ordered = order_by_dependencies(recommendations, gap_sizes)
    if limit is not None and limit > 0:
        # A prefix of a dependency-consistent order is still consistent
        ordered = ordered[:limit]
    return ordered


def get_highest_impact_skill(
    profile: UserProfile,
    career_path: CareerPath,
    recommendations: Optional[list[SkillRecommendation]] = None,
) -> Optional[SkillRecommendation]:
    """
    The single skill to focus on when time is short.

    Prefers the highest-priority skill whose prerequisites the user already
    has or is learning; falls back to the first recommendation.
    """
    if recommendations is None:
        recommendations = recommend_skills(profile, career_path)
    if not recommendations:
        return None

    known = {s.name.lower() for s in profile.skills.current + profile.skills.learning}
    unblocked = [
        rec
        for rec in recommendations
        if all(dep.lower() in known for dep in rec.dependencies)
    ]
    if unblocked:
        return max(unblocked, key=lambda rec: rec.priority)
    return recommendations[0]


def _reasoning(skill: str, gap_size: int, info: SkillInfo, career_path: CareerPath) -> str:
    reasons: list[str] = []

    if any(s.lower() == skill.lower() for s in career_path.required_skills):
        reasons.append(f"{skill} is essential for your target career path in {career_path.title}")

    if info.impact >= 0.8:
        reasons.append("This skill has high impact on your career progression")
    elif info.impact >= 0.6:
        reasons.append("This skill will significantly enhance your capabilities")

    if gap_size >= 4:
        reasons.append("Closing this skill gap is a priority for reaching your goals")
    elif gap_size >= 2:
        reasons.append("Developing this skill will help you advance toward your target level")

    if info.learning_months <= 3:
        reasons.append("This skill can be learned relatively quickly")
    elif info.learning_months >= 9:
        reasons.append(
            "This skill requires significant time investment but offers long-term value"
        )

    if info.dependencies:
        reasons.append(f"Building on your knowledge of {' and '.join(info.dependencies[:2])}")

    return ". ".join(reasons) + "."

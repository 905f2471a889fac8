"""
Career Path Recommendations

Scores the catalog's career templates against a profile and explains each
match. A profile with no usable signal still receives the generic
"General Career Development" path.

Fit score (all terms in [0, 1]):
    0.4 * min(matching interests / 3, 1)
  + 0.3 * min(matching skills / 5, 1)
  + 0.2 * growth potential
  + 0.1 * experience (min(years / 10, 1), or 0.5 under two years)

Example Usage:
    paths = identify_trade_offs(generate_career_paths(profile, limit=3))
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from ..models.core import CareerPath, UserProfile
from .catalog import CAREER_TEMPLATES

INTEREST_WEIGHT = 0.4
SKILL_WEIGHT = 0.3
GROWTH_WEIGHT = 0.2
EXPERIENCE_WEIGHT = 0.1

SENIOR_PATH_SKILLS = ("leadership", "advanced technical skills", "mentoring")
SENIOR_PATH_GROWTH = 0.7

DEFAULT_TIMELINE_MONTHS = 12.0
_TIMELINE_RE = re.compile(r"(\d+)-?(\d+)?\s*months?", re.IGNORECASE)


@dataclass
class _Candidate:
    title: str
    description: str
    required_skills: list[str]
    growth_potential: float
    matching_interests: list[str] = field(default_factory=list)
    matching_skills: list[str] = field(default_factory=list)


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def parse_timeline_months(timeline: str) -> float:
    """Midpoint of a "N-M months" string; 12 when it cannot be parsed."""
    match = _TIMELINE_RE.search(timeline or "")
    if not match:
        return DEFAULT_TIMELINE_MONTHS
    low = int(match.group(1))
    high = int(match.group(2)) if match.group(2) else low
    return (low + high) / 2


def generate_career_paths(
    profile: UserProfile, limit: Optional[int] = None
) -> list[CareerPath]:
    """
    Recommend career paths ordered by fit score, best first.

    Args:
        profile: Profile snapshot to match against
        limit: Keep at most this many paths (None keeps all)

    Returns:
        A non-empty list; every path has non-empty reasoning
    """
    paths = [
        CareerPath(
            id=f"path-{slugify(candidate.title)}",
            title=candidate.title,
            description=candidate.description,
            reasoning=_reasoning(profile, candidate),
            fit_score=round(_fit_score(profile, candidate), 4),
            required_skills=list(candidate.required_skills),
            time_to_transition=_estimate_transition_time(profile, candidate),
            growth_potential=candidate.growth_potential,
        )
        for candidate in _candidates(profile)
    ]
    # Stable sort keeps catalog order among equal scores
    paths.sort(key=lambda p: p.fit_score, reverse=True)

    if limit is not None and limit > 0:
        paths = paths[:limit]
    if not paths:
        paths.append(default_career_path())
    return paths


def default_career_path() -> CareerPath:
    return CareerPath(
        id="path-general-career-development",
        title="General Career Development",
        description="Focus on building foundational skills and exploring career options",
        reasoning=(
            "Based on your profile, we recommend starting with skill development "
            "and career exploration to identify the best path forward."
        ),
        fit_score=0.5,
        required_skills=["communication", "problem-solving", "time management"],
        time_to_transition="6-12 months",
        growth_potential=0.6,
    )


def identify_trade_offs(paths: list[CareerPath]) -> list[CareerPath]:
    """
    Annotate each path with its strengths relative to the others.

    Trade-offs are stored on `trade_offs` and appended to the reasoning.
    A single path is returned unchanged.
    """
    if len(paths) <= 1:
        return paths

    months = [parse_timeline_months(p.time_to_transition) for p in paths]
    fastest = paths[months.index(min(months))]
    top_growth = max(paths, key=lambda p: p.growth_potential)

    annotated: list[CareerPath] = []
    for index, path in enumerate(paths):
        others = [i for i in range(len(paths)) if i != index]
        trade_offs: list[str] = []

        if all(path.fit_score >= paths[i].fit_score for i in others):
            trade_offs.append("Best overall fit for your profile")

        if all(months[index] <= months[i] for i in others):
            trade_offs.append("Fastest path to transition")
        else:
            trade_offs.append(f"Longer transition time compared to {fastest.title}")

        if all(path.growth_potential >= paths[i].growth_potential for i in others):
            trade_offs.append("Highest long-term growth potential")
        else:
            trade_offs.append(f"Lower growth potential than {top_growth.title}")

        annotated.append(
            path.model_copy(
                update={
                    "trade_offs": trade_offs,
                    "reasoning": f"{path.reasoning} Trade-offs: {'; '.join(trade_offs)}.",
                }
            )
        )
    return annotated


def _candidates(profile: UserProfile) -> list[_Candidate]:
    interests = profile.career_info.interests
    current_skills = profile.skills.current
    industry = (profile.personal_info.industry or "").lower()
    current_role = profile.personal_info.current_role

    candidates: list[_Candidate] = []
    for template in CAREER_TEMPLATES:
        matching_interests = [
            interest
            for interest in interests
            if any(keyword in interest.lower() for keyword in template.keywords)
        ]
        matching_skills = [
            skill.name
            for skill in current_skills
            if any(related in skill.name.lower() for related in template.related_skills)
        ]
        if matching_interests or matching_skills or (industry and industry in template.industries):
            candidates.append(
                _Candidate(
                    title=template.title,
                    description=template.description,
                    required_skills=list(template.required_skills),
                    growth_potential=template.growth_potential,
                    matching_interests=matching_interests,
                    matching_skills=matching_skills,
                )
            )

    if current_role:
        candidates.append(
            _Candidate(
                title=f"Senior {current_role}",
                description=f"Advance to a senior position in your current role as {current_role}",
                required_skills=list(SENIOR_PATH_SKILLS),
                growth_potential=SENIOR_PATH_GROWTH,
                matching_skills=[s.name for s in current_skills],
            )
        )
    return candidates


def _experience_score(years: float) -> float:
    return min(years / 10, 1.0) if years >= 2 else 0.5


def _fit_score(profile: UserProfile, candidate: _Candidate) -> float:
    interest_score = min(len(candidate.matching_interests) / 3, 1.0)
    skill_score = min(len(candidate.matching_skills) / 5, 1.0)
    return (
        interest_score * INTEREST_WEIGHT
        + skill_score * SKILL_WEIGHT
        + candidate.growth_potential * GROWTH_WEIGHT
        + _experience_score(profile.personal_info.years_of_experience) * EXPERIENCE_WEIGHT
    )


def _reasoning(profile: UserProfile, candidate: _Candidate) -> str:
    reasons: list[str] = []

    if candidate.matching_interests:
        reasons.append(
            "This path aligns with your interests in "
            + " and ".join(candidate.matching_interests[:2])
        )
    if candidate.matching_skills:
        reasons.append(
            "You already have relevant skills like "
            + " and ".join(candidate.matching_skills[:2])
        )
    if candidate.growth_potential >= 0.7:
        reasons.append(
            "This field offers strong growth potential and career advancement opportunities"
        )

    years = profile.personal_info.years_of_experience
    if years >= 3:
        reasons.append("Your experience level makes you well-positioned for this transition")
    elif years < 2:
        reasons.append("This path is accessible for early-career professionals")

    if not reasons:
        reasons.append(
            "This path offers opportunities for professional growth and skill development"
        )
    return ". ".join(reasons) + "."


def _estimate_transition_time(profile: UserProfile, candidate: _Candidate) -> str:
    required = candidate.required_skills
    if required:
        held = sum(
            1
            for skill in required
            if any(skill.lower() in s.name.lower() for s in profile.skills.current)
        )
        gap_ratio = 1 - held / len(required)
    else:
        gap_ratio = 0.5

    if gap_ratio < 0.3 and profile.personal_info.years_of_experience >= 2:
        return "3-6 months"
    if gap_ratio < 0.5:
        return "6-12 months"
    if gap_ratio < 0.7:
        return "12-18 months"
    return "18-24 months"

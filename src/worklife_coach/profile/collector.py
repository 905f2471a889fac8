"""
Profile Collector

Builds profiles from first-session input and folds facts extracted from
later messages back into them.
"""

from typing import Any, Optional

from ..models.core import Challenge, PersonalInfo, Skill, UserProfile
from .analyzer import categorize_challenge, find_skill

NEW_SKILL_LEVEL = 1
MAX_STRUGGLE_LENGTH = 280


def collect_profile_data(
    user_id: str,
    age: int = 0,
    current_role: Optional[str] = None,
    years_of_experience: float = 0,
    education: str = "",
    industry: Optional[str] = None,
) -> UserProfile:
    """
    Create a profile with personal details and empty career, skill, and
    progress records.

    Called with only a user id, this yields the minimal default profile the
    orchestrator uses when the data store has none.
    """
    return UserProfile(
        user_id=user_id,
        personal_info=PersonalInfo(
            age=age,
            current_role=current_role,
            years_of_experience=years_of_experience,
            education=education,
            industry=industry,
        ),
    )


def merge_entities(profile: UserProfile, entities: dict[str, Any]) -> UserProfile:
    """
    Return a copy of the profile updated with extracted message entities.

    - career_fields become interests
    - skills not yet known become learning skills
    - years_of_experience replaces the stored value
    """
    updated = profile.model_copy(deep=True)

    known_interests = {i.lower() for i in updated.career_info.interests}
    for field_name in entities.get("career_fields", []):
        if field_name.lower() not in known_interests:
            updated.career_info.interests.append(field_name)
            known_interests.add(field_name.lower())

    for skill_name in entities.get("skills", []):
        if find_skill(updated.skills.current, skill_name) or find_skill(
            updated.skills.learning, skill_name
        ):
            continue
        updated.skills.learning.append(
            Skill(name=skill_name, level=NEW_SKILL_LEVEL, category="general")
        )

    years = entities.get("years_of_experience")
    if years is not None:
        updated.personal_info.years_of_experience = min(max(float(years), 0.0), 60.0)

    return updated


def record_struggle(
    profile: UserProfile, description: str, severity: int = 5
) -> UserProfile:
    """Return a copy with the description added as a categorized challenge."""
    updated = profile.model_copy(deep=True)
    text = description.strip()[:MAX_STRUGGLE_LENGTH]
    if not text:
        return updated
    if any(c.description == text for c in updated.career_info.struggles):
        return updated

    updated.career_info.struggles.append(
        Challenge(
            type=categorize_challenge(text),
            description=text,
            severity=min(max(severity, 0), 10),
        )
    )
    return updated

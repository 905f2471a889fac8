"""Profile analysis and collection."""

from .analyzer import (
    CHALLENGE_RULES,
    DEFAULT_CHALLENGE_TYPE,
    ProfileAnalyzer,
    categorize_challenge,
)
from .collector import collect_profile_data, merge_entities, record_struggle

__all__ = [
    "CHALLENGE_RULES",
    "DEFAULT_CHALLENGE_TYPE",
    "ProfileAnalyzer",
    "categorize_challenge",
    "collect_profile_data",
    "merge_entities",
    "record_struggle",
]

"""Rule-based intent recognition and emotional content detection."""

from .classifier import (
    INTENT_RULES,
    EmotionalContent,
    IntentClassifier,
    detect_emotional_content,
    emotional_content_of,
    extract_entities,
    has_emotional_struggle,
    should_prioritize_mindset,
)

__all__ = [
    "INTENT_RULES",
    "EmotionalContent",
    "IntentClassifier",
    "detect_emotional_content",
    "emotional_content_of",
    "extract_entities",
    "has_emotional_struggle",
    "should_prioritize_mindset",
]

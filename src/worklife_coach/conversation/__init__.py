"""Response formatting and coach behavior."""

from .coach_behavior import (
    FIRST_TIME_GREETING,
    STARTER_QUESTIONS,
    WELCOME_MESSAGE,
    follow_up_question,
    has_actionable_element,
    mindset_support_text,
)
from .formatter import FormattedResponse, ResponseFormatter

__all__ = [
    "FIRST_TIME_GREETING",
    "FormattedResponse",
    "ResponseFormatter",
    "STARTER_QUESTIONS",
    "WELCOME_MESSAGE",
    "follow_up_question",
    "has_actionable_element",
    "mindset_support_text",
]

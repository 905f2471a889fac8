"""
Coach Behavior

Tone and conversational moves of the coach: greetings, mindset support that
leads a response when the user is struggling, intent-specific follow-up
questions, and the check that every response gives the user something to do.
"""

import re
from typing import Optional

from ..intent.classifier import EmotionalContent
from ..models.core import IntentType

WELCOME_MESSAGE = (
    "Hi! I'm your WorkLife coach. I'm here to help you get unstuck in your "
    "career, whether you're figuring out what to learn next, thinking about "
    "switching fields, or just feeling lost about where you're headed. "
    "Let's talk through it together."
)

FIRST_TIME_GREETING = """Welcome! I'm glad you're here. Before we dive in, I'd love to understand where you're at right now.

Could you tell me a bit about yourself? Things like:
- What you're currently doing (job, field, or studying)
- What's been on your mind lately about your career
- What you're hoping to figure out

No need to write a novel. Just whatever feels relevant."""

STARTER_QUESTIONS = (
    "I'm not sure what career path is right for me. Where do I even start?",
    "I feel stuck in my current job. How do I know if I should stay or leave?",
    "What skills should I learn to advance my career?",
    "I want to switch careers. How do I make the transition?",
    "How do I grow in my current role without changing jobs?",
    "I lack confidence in my abilities. How can I build it?",
    "I'm overwhelmed with too many goals. What should I focus on first?",
)

# Checked in order; the first indicator present selects the text
MINDSET_BY_INDICATOR: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("anxiety", "stress"),
        "I hear that you're feeling anxious or stressed. That's completely normal "
        "when navigating career decisions. Let's break this down into manageable steps.",
    ),
    (
        ("confusion", "doubt"),
        "Feeling uncertain about your career direction is something many "
        "professionals experience. Let's work together to bring some clarity.",
    ),
    (
        ("fear",),
        "It takes courage to acknowledge your fears. Let's address them head-on "
        "and create a plan that feels achievable.",
    ),
    (
        ("frustration",),
        "I understand your frustration. Let's identify what's not working and "
        "find practical solutions.",
    ),
    (
        ("stagnation",),
        "Feeling stuck is a signal that it's time for change. Let's explore your "
        "options and create momentum.",
    ),
    (
        ("low confidence",),
        "Building confidence is a journey. Let's focus on your strengths and "
        "create wins that reinforce your capabilities.",
    ),
)

# Used when the message shows struggle words the indicator table does not cover
MINDSET_BY_PHRASE: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("not good enough", "confidence", "imposter"),
        "First, let's address this confidence piece. You're comparing your "
        "behind-the-scenes to everyone else's highlight reel. They're not more "
        "qualified, they're just better at talking about what they've done.",
    ),
    (
        ("overwhelmed", "too much", "burned out", "exhausted"),
        "Let's pause on the tactics for a moment. When everything feels urgent, "
        "nothing gets done. We need to pick one thing and make real progress there first.",
    ),
    (
        ("scared", "afraid"),
        "That fear is valid, change is uncomfortable. But the discomfort of "
        "staying stuck often becomes worse than the discomfort of making a change.",
    ),
    (
        ("stuck", "lost"),
        "Feeling stuck doesn't mean you're failing. It means you've outgrown "
        "where you are, and that's actually progress.",
    ),
)

GENERIC_MINDSET_SUPPORT = (
    "I'm here to support you through this. Let's work through it together."
)

FOLLOW_UP_QUESTIONS = {
    IntentType.CAREER_CLARITY: "What does success look like for you in your career?",
    IntentType.SKILL_GUIDANCE: (
        "What are you hoping this skill will do for you: switch fields, grow in "
        "your current role, or something else?"
    ),
    IntentType.ACTION_PLANNING: "What's one small step you could take this week?",
    IntentType.TRANSITION_GUIDANCE: "What's stopping you from making this transition?",
    IntentType.MINDSET_SUPPORT: "What would need to be true for you to feel ready?",
    IntentType.GROWTH_PLANNING: "Where do you want to be in 6 months?",
    IntentType.PROGRESS_CHECK: "How did that go? What did you learn?",
}
OPENING_QUESTION = "What's been on your mind about this lately?"
DEFAULT_FOLLOW_UP = "What would you like to focus on next?"

ACTIONABLE_INDICATORS = (
    "try", "start", "create", "write", "reach out", "talk to",
    "apply", "learn", "practice", "ask", "explore", "research",
    "today", "this week", "this month", "next",
    "recommend", "suggest", "consider", "focus on",
    "step", "action",
)
# Whole words only, allowing plain inflections ("steps", "trying"); "do" must stand alone
ACTIONABLE_PATTERN = re.compile(
    r"\?|\bdo\b|\b(?:"
    + "|".join(re.escape(i) for i in ACTIONABLE_INDICATORS)
    + r")(?:s|es|ed|ing)?\b"
)

MAX_EXCLAMATIONS = 2


def mindset_support_text(
    emotional: Optional[EmotionalContent], message: str = ""
) -> str:
    """
    Supportive opening for a struggling user.

    The dominant emotional indicator picks the text; failing that, struggle
    phrases in the message do; otherwise a generic supportive line is used.
    """
    indicators = set(emotional.indicators) if emotional else set()
    for keys, text in MINDSET_BY_INDICATOR:
        if indicators.intersection(keys):
            return text

    lowered = message.lower()
    for phrases, text in MINDSET_BY_PHRASE:
        if any(p in lowered for p in phrases):
            return text
    return GENERIC_MINDSET_SUPPORT


def follow_up_question(intent_type: IntentType, has_profile: bool = True) -> str:
    """Question that keeps the conversation moving for this intent."""
    if not has_profile:
        return OPENING_QUESTION
    return FOLLOW_UP_QUESTIONS.get(intent_type, DEFAULT_FOLLOW_UP)


def has_actionable_element(text: str) -> bool:
    """True when the text asks a question or names something to do."""
    return bool(ACTIONABLE_PATTERN.search(text.lower()))


def temper_exclamations(text: str, limit: int = MAX_EXCLAMATIONS) -> str:
    """Keep the first `limit` exclamation marks and turn the rest into periods."""
    count = 0

    def replace(match: re.Match[str]) -> str:
        nonlocal count
        count += 1
        return match.group(0) if count <= limit else "."

    return re.sub("!", replace, text)

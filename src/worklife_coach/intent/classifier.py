"""
Intent Recognition

Rule-based classification of user messages. Every intent owns one row of an
ordered rule table: keyword hits score 1 point, phrase patterns score 2, the
highest total wins and ties go to the row listed first. Emotional content is
scored separately so the orchestrator can put mindset support ahead of
tactical advice.

Example Usage:
    classifier = IntentClassifier()
    intent = classifier.classify("I feel stuck. What should I learn next?")
    intent.type            # IntentType.SKILL_GUIDANCE
    intent.entities        # {"emotional": {...}, ...}
    should_prioritize_mindset(intent, "I feel stuck...")  # True
"""

import re
from typing import Any, Optional

import structlog
from pydantic import BaseModel, Field

from ..models.core import Intent, IntentType
from ..utils.rules import Rule, RuleTable, compile_patterns

logger = structlog.get_logger(__name__)

BASE_CONFIDENCE = 0.5
LONG_MESSAGE_WORDS = 20
MEDIUM_MESSAGE_WORDS = 10
CONFIDENCE_PER_KEYWORD = 0.1
MINDSET_SEVERITY_THRESHOLD = 0.5
EMPHATIC_PUNCTUATION_WEIGHT = 0.2

INTENT_RULES: RuleTable[IntentType] = RuleTable(
    [
        Rule(
            IntentType.PROFILE_BUILDING,
            keywords=("background", "experience", "education", "skills", "current role", "about me", "my story"),
            patterns=compile_patterns(
                r"i (am|work|studied|have|graduated)",
                r"my (background|experience|education|skills)",
            ),
        ),
        Rule(
            IntentType.CAREER_CLARITY,
            keywords=("career path", "direction", "what should i do", "career options", "confused", "lost", "unclear"),
            patterns=compile_patterns(
                r"what (career|path|direction)",
                r"should i (become|pursue|go into)",
                r"don't know what",
            ),
        ),
        Rule(
            IntentType.SKILL_GUIDANCE,
            keywords=("learn", "skill", "training", "course", "what to learn", "improve", "develop"),
            patterns=compile_patterns(
                r"what (skill|should i learn)",
                r"how (do i|can i) learn",
                r"need to (learn|improve)",
            ),
        ),
        Rule(
            IntentType.ACTION_PLANNING,
            keywords=("next step", "what should i do", "action", "plan", "today", "this week", "start"),
            patterns=compile_patterns(
                r"what (should|can) i do",
                r"next step",
                r"how do i (start|begin)",
                r"where do i start",
            ),
        ),
        Rule(
            IntentType.MINDSET_SUPPORT,
            keywords=("confidence", "motivation", "doubt", "fear", "anxious", "stressed", "overwhelmed", "stuck"),
            patterns=compile_patterns(
                r"feel (anxious|stressed|overwhelmed|stuck|lost)",
                r"lack (confidence|motivation)",
                r"not confident",
            ),
        ),
        Rule(
            IntentType.GROWTH_PLANNING,
            keywords=("growth plan", "long term", "future", "roadmap", "milestone", "goal", "plan"),
            patterns=compile_patterns(
                r"long[- ]term (plan|goal)",
                r"growth plan",
                r"where (will|should) i be",
                r"in \d+ (months|years)",
            ),
        ),
        Rule(
            IntentType.TRANSITION_GUIDANCE,
            keywords=("career change", "switch", "transition", "move to", "change field", "new career"),
            patterns=compile_patterns(
                r"(change|switch|transition) (career|field|to)",
                r"move (to|into)",
                r"from .* to",
            ),
        ),
        Rule(
            IntentType.PROGRESS_CHECK,
            keywords=("progress", "update", "completed", "finished", "done", "accomplished"),
            patterns=compile_patterns(
                r"i (completed|finished|did|accomplished)",
                r"made progress",
                r"update on",
            ),
        ),
    ],
    name="intent_rules",
)

# Words that make the classification more certain once the intent is chosen
CONFIDENCE_KEYWORDS: dict[IntentType, tuple[str, ...]] = {
    IntentType.PROFILE_BUILDING: ("background", "experience", "education"),
    IntentType.CAREER_CLARITY: ("career", "path", "direction"),
    IntentType.SKILL_GUIDANCE: ("learn", "skill", "training"),
    IntentType.ACTION_PLANNING: ("next", "step", "action"),
    IntentType.MINDSET_SUPPORT: ("feel", "confidence", "motivation"),
    IntentType.GROWTH_PLANNING: ("plan", "goal", "future"),
    IntentType.TRANSITION_GUIDANCE: ("change", "transition", "switch"),
    IntentType.PROGRESS_CHECK: ("progress", "completed", "done"),
}


def _emotion(indicator: str, words: str, weight: float) -> Rule[str]:
    return Rule(indicator, patterns=compile_patterns(rf"\b(?:{words})\b"), weight=weight)


# Positive emotions weigh less so they rarely trigger mindset-first ordering
EMOTION_RULES: tuple[Rule[str], ...] = (
    _emotion("anxiety", "anxious|anxiety|worried|worry|nervous", 0.8),
    _emotion("stress", "stressed|stress|overwhelmed|overwhelm", 0.9),
    _emotion("confusion", "confused|confusing|lost|don't know|unsure", 0.7),
    _emotion("fear", "scared|afraid|fear|terrified", 0.8),
    _emotion("frustration", "frustrated|frustrating|frustration", 0.7),
    _emotion("sadness", "depressed|depression|sad|hopeless", 0.9),
    _emotion("stagnation", "stuck|trapped|can't move forward", 0.7),
    _emotion("doubt", "doubt|doubting|uncertain|unsure", 0.6),
    _emotion("low confidence", "lack confidence|no confidence|not confident", 0.8),
    _emotion("failure", "failing|failure|failed", 0.7),
    _emotion("excitement", "excited|exciting|enthusiastic", 0.3),
    _emotion("motivation", "motivated|motivation|inspired", 0.3),
    _emotion("hope", "hopeful|optimistic|positive", 0.3),
)

EMPHATIC_PUNCTUATION = re.compile(r"[!?]{2,}")

STRUGGLE_WORDS = (
    "scared", "afraid", "worried", "anxious", "nervous",
    "doubt", "confidence", "not good enough", "imposter",
    "overwhelmed", "stressed", "burned out", "exhausted",
    "lost", "confused", "stuck", "frustrated", "hopeless",
)

CAREER_FIELDS = (
    "software engineering", "data science", "product management", "ux design",
    "digital marketing", "business analysis", "project management", "finance",
    "healthcare", "education", "sales", "consulting", "engineering",
)

SKILL_TERMS = (
    "python", "javascript", "java", "sql", "react", "node",
    "communication", "leadership", "project management", "data analysis",
    "design", "marketing", "sales", "writing",
)

TIMEFRAME_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(today|now|immediately)\b", re.IGNORECASE), "today"),
    (re.compile(r"\bthis week\b", re.IGNORECASE), "this_week"),
    (re.compile(r"\bthis month\b", re.IGNORECASE), "this_month"),
    (re.compile(r"\b(\d+)\s*(month|year)s?\b", re.IGNORECASE), "long_term"),
)

EXPERIENCE_PATTERN = re.compile(r"(\d+)\s*years?\s*(of\s*)?(experience|exp)", re.IGNORECASE)


class EmotionalContent(BaseModel):
    """Emotional signal found in a message; severity is normalized to 0-1."""

    has_emotional_content: bool = False
    indicators: list[str] = Field(default_factory=list)
    severity: float = Field(default=0.0, ge=0.0, le=1.0)


def detect_emotional_content(message: str) -> EmotionalContent:
    """
    Score the emotional content of a message.

    Each indicator contributes its weight once per occurrence; two or more
    consecutive '!' or '?' add 0.2. Severity is half the total, capped at 1.
    """
    indicators: list[str] = []
    total = 0.0

    for rule in EMOTION_RULES:
        count = rule.occurrences(message)
        if count:
            indicators.append(rule.category)
            total += rule.weight * count

    if EMPHATIC_PUNCTUATION.search(message):
        total += EMPHATIC_PUNCTUATION_WEIGHT

    return EmotionalContent(
        has_emotional_content=bool(indicators),
        indicators=indicators,
        severity=min(total / 2, 1.0),
    )


def has_emotional_struggle(message: str) -> bool:
    """True when the message uses any of the struggle words."""
    text = message.lower()
    return any(word in text for word in STRUGGLE_WORDS)


def _mentioned(terms: tuple[str, ...], text_lower: str) -> list[str]:
    return [t for t in terms if re.search(rf"\b{re.escape(t)}\b", text_lower)]


def extract_entities(message: str) -> dict[str, Any]:
    """
    Pull career fields, skills, a timeframe and years of experience from text.

    Keys are only present when something was found:
        career_fields, skills: lists of catalog terms (whole-word matches)
        timeframe: "today", "this_week", "this_month" or "long_term"
        duration, duration_unit: for "long_term", e.g. 6 and "month"
        years_of_experience: int
    """
    entities: dict[str, Any] = {}
    text_lower = message.lower()

    fields = _mentioned(CAREER_FIELDS, text_lower)
    if fields:
        entities["career_fields"] = fields

    skills = _mentioned(SKILL_TERMS, text_lower)
    if skills:
        entities["skills"] = skills

    for pattern, value in TIMEFRAME_PATTERNS:
        match = pattern.search(message)
        if match is None:
            continue
        entities["timeframe"] = value
        if value == "long_term":
            entities["duration"] = int(match.group(1))
            entities["duration_unit"] = match.group(2).lower()
        break

    experience = EXPERIENCE_PATTERN.search(message)
    if experience:
        entities["years_of_experience"] = int(experience.group(1))

    return entities


def calculate_confidence(message: str, intent_type: IntentType) -> float:
    text_lower = message.lower()
    confidence = BASE_CONFIDENCE

    word_count = len(text_lower.split())
    if word_count > LONG_MESSAGE_WORDS:
        confidence += 0.2
    elif word_count > MEDIUM_MESSAGE_WORDS:
        confidence += 0.1

    hits = sum(1 for k in CONFIDENCE_KEYWORDS.get(intent_type, ()) if k in text_lower)
    confidence += hits * CONFIDENCE_PER_KEYWORD
    return round(min(confidence, 1.0), 2)


class IntentClassifier:
    """Classifies messages into intents with confidence and entities."""

    def __init__(self, rules: Optional[RuleTable[IntentType]] = None) -> None:
        self.rules = rules or INTENT_RULES

    def classify_type(self, message: str) -> IntentType:
        """Best-scoring intent; with no hits, questions default to career clarity."""
        best = self.rules.best(message)
        if best is not None:
            return best
        if "?" in message:
            return IntentType.CAREER_CLARITY
        return IntentType.PROFILE_BUILDING

    def classify(self, message: str) -> Intent:
        intent_type = self.classify_type(message)
        entities = extract_entities(message)

        emotional = detect_emotional_content(message)
        if emotional.has_emotional_content:
            entities["emotional"] = emotional.model_dump()

        intent = Intent(
            type=intent_type,
            confidence=calculate_confidence(message, intent_type),
            entities=entities,
        )
        logger.debug(
            "intent_classified",
            intent=intent.type.value,
            confidence=intent.confidence,
            entity_keys=sorted(entities),
        )
        return intent


def emotional_content_of(intent: Intent) -> Optional[EmotionalContent]:
    data = intent.entities.get("emotional")
    if not data:
        return None
    return EmotionalContent.model_validate(data)


def should_prioritize_mindset(intent: Intent, message: str = "") -> bool:
    """
    Decide whether mindset support leads the response.

    True for mindset_support intents, for emotional content of severity
    0.5 or more, and for any message using a struggle word, regardless of
    the topical intent.
    """
    if intent.type == IntentType.MINDSET_SUPPORT:
        return True
    emotional = emotional_content_of(intent)
    if emotional and emotional.severity >= MINDSET_SEVERITY_THRESHOLD:
        return True
    return has_emotional_struggle(message)

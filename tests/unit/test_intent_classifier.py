"""
Unit tests for intent recognition.
"""

import pytest

from worklife_coach.models.core import Intent, IntentType
from worklife_coach.intent.classifier import (
    IntentClassifier,
    calculate_confidence,
    detect_emotional_content,
    emotional_content_of,
    extract_entities,
    has_emotional_struggle,
    should_prioritize_mindset,
)


@pytest.fixture
def classifier() -> IntentClassifier:
    return IntentClassifier()


class TestClassifyType:
    """Test cases for intent selection."""

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("What skills should I learn for data science?", IntentType.SKILL_GUIDANCE),
            ("I want to switch to product management", IntentType.TRANSITION_GUIDANCE),
            ("I completed my resume update today", IntentType.PROGRESS_CHECK),
            ("What career direction suits me?", IntentType.CAREER_CLARITY),
            ("What is my next step this week?", IntentType.ACTION_PLANNING),
            ("I lack confidence and motivation", IntentType.MINDSET_SUPPORT),
            ("Can you build a growth plan for the long-term?", IntentType.GROWTH_PLANNING),
        ],
    )
    def test_keyword_and_pattern_scoring(self, classifier, message, expected):
        """Test that the highest-scoring intent wins."""
        assert classifier.classify_type(message) == expected

    def test_unmatched_question_defaults_to_clarity(self, classifier):
        """Test that a question with no hits is treated as career clarity."""
        assert classifier.classify_type("Any ideas?") == IntentType.CAREER_CLARITY

    def test_unmatched_statement_defaults_to_profile(self, classifier):
        """Test that a statement with no hits builds the profile."""
        assert classifier.classify_type("Hello there") == IntentType.PROFILE_BUILDING

    def test_ties_go_to_earlier_rule(self, classifier):
        """Test that clarity beats mindset on an equal score."""
        message = "I feel so anxious and stuck, I don't know what to do!!"
        assert classifier.classify_type(message) == IntentType.CAREER_CLARITY


class TestClassify:
    """Test cases for full classification."""

    def test_intent_with_entities_and_confidence(self, classifier):
        """Test that classify returns type, confidence, and entities."""
        # Act
        intent = classifier.classify("What skills should I learn for data science?")

        # Assert
        assert intent.type == IntentType.SKILL_GUIDANCE
        assert intent.confidence == pytest.approx(0.7)
        assert intent.entities == {"career_fields": ["data science"]}

    def test_emotional_content_attached(self, classifier):
        """Test that emotional analysis is stored in the entities."""
        intent = classifier.classify("I'm worried about my job")

        emotional = emotional_content_of(intent)

        assert emotional.indicators == ["anxiety"]
        assert emotional.severity == pytest.approx(0.4)

    def test_no_emotional_entry_for_neutral_text(self, classifier):
        """Test that neutral text has no emotional entity."""
        intent = classifier.classify("What skills should I learn?")
        assert emotional_content_of(intent) is None


class TestEntities:
    """Test cases for extract_entities."""

    def test_skills_and_experience(self):
        """Test that skills and years of experience are found."""
        entities = extract_entities("I have 5 years of experience with Python and SQL")

        assert entities["skills"] == ["python", "sql"]
        assert entities["years_of_experience"] == 5

    def test_whole_word_matching(self):
        """Test that a term inside another word is not extracted."""
        entities = extract_entities("I mostly write javascript")
        assert entities["skills"] == ["javascript"]

    @pytest.mark.parametrize(
        "message, timeframe",
        [
            ("What can I do today?", "today"),
            ("Plans for this week", "this_week"),
            ("Something for this month", "this_month"),
        ],
    )
    def test_timeframes(self, message, timeframe):
        """Test that timeframe phrases are recognized."""
        assert extract_entities(message)["timeframe"] == timeframe

    def test_long_term_duration(self):
        """Test that a duration is captured for long-term horizons."""
        entities = extract_entities("Where should I be in 6 months?")

        assert entities["timeframe"] == "long_term"
        assert entities["duration"] == 6
        assert entities["duration_unit"] == "month"

    def test_nothing_found(self):
        """Test that no keys are present without matches."""
        assert extract_entities("hello") == {}


class TestEmotionalContent:
    """Test cases for emotional detection."""

    def test_combined_severity_capped(self):
        """Test that many indicators and emphatic punctuation cap at 1."""
        emotional = detect_emotional_content(
            "I feel so anxious and stuck, I don't know what to do!!"
        )

        assert emotional.has_emotional_content
        assert emotional.indicators == ["anxiety", "confusion", "stagnation"]
        assert emotional.severity == 1.0

    def test_positive_emotion_is_mild(self):
        """Test that positive words weigh little."""
        emotional = detect_emotional_content("I'm excited about my new project")

        assert emotional.indicators == ["excitement"]
        assert emotional.severity == pytest.approx(0.15)

    def test_repeated_words_count_each_time(self):
        """Test that each occurrence adds its weight."""
        emotional = detect_emotional_content("worried, so worried")
        assert emotional.severity == pytest.approx(0.8)

    def test_neutral_text(self):
        """Test that neutral text has no indicators."""
        emotional = detect_emotional_content("Tell me about SQL")
        assert not emotional.has_emotional_content
        assert emotional.severity == 0.0

    @pytest.mark.parametrize(
        "message, expected",
        [("I'm not good enough", True), ("I'm burned out", True), ("All good here", False)],
    )
    def test_has_emotional_struggle(self, message, expected):
        """Test the struggle word check."""
        assert has_emotional_struggle(message) is expected


class TestConfidence:
    """Test cases for calculate_confidence."""

    def test_base_confidence(self):
        """Test the base value for a short message without keywords."""
        assert calculate_confidence("hi", IntentType.PROGRESS_CHECK) == 0.5

    def test_long_message_bonus(self):
        """Test that longer messages are more certain."""
        message = " ".join(["word"] * 25)
        assert calculate_confidence(message, IntentType.PROGRESS_CHECK) == 0.7

    def test_capped_at_one(self):
        """Test that confidence never exceeds 1."""
        message = "progress completed done " * 10
        assert calculate_confidence(message, IntentType.PROGRESS_CHECK) == 1.0


class TestShouldPrioritizeMindset:
    """Test cases for mindset-first ordering."""

    def test_mindset_intent(self):
        """Test that mindset intents always lead with support."""
        assert should_prioritize_mindset(Intent(type=IntentType.MINDSET_SUPPORT))

    def test_severe_emotion_overrides_topic(self, classifier):
        """Test that strong emotion leads even for a topical intent."""
        message = "I feel so anxious and stuck, I don't know what to do!!"
        intent = classifier.classify(message)

        assert intent.type != IntentType.MINDSET_SUPPORT
        assert should_prioritize_mindset(intent, message)

    def test_struggle_word_without_severity(self, classifier):
        """Test that a struggle word alone is enough."""
        message = "What skills should I learn? I feel like an imposter"
        intent = classifier.classify(message)

        assert should_prioritize_mindset(intent, message)

    def test_neutral_message(self, classifier):
        """Test that neutral messages go straight to tactics."""
        message = "What skills should I learn for data science?"
        assert not should_prioritize_mindset(classifier.classify(message), message)

"""
Ordered keyword/pattern rule tables.

A RuleTable maps text to categories through an explicit, ordered list of
rules so the matching policy can be read and tested on its own. Two
evaluation modes are supported:

- first match wins (`classify`), used for challenge categorization
- additive scoring (`score` / `best`), used for intent recognition, where
  keyword hits count 1 point and regex hits count 2; ties go to the rule
  that appears first in the table

Example Usage:
    table = RuleTable(
        [
            Rule("billing", keywords=("invoice", "refund")),
            Rule("support", patterns=compile_patterns(r"\\bhelp\\b")),
        ],
        default="other",
    )
    table.classify("I need a refund")  # -> "billing"
"""

import re
from dataclasses import dataclass, field
from typing import Generic, Optional, Sequence, TypeVar

C = TypeVar("C")

KEYWORD_POINTS = 1
PATTERN_POINTS = 2


def compile_patterns(*regexes: str) -> tuple[re.Pattern[str], ...]:
    """Compile case-insensitive patterns for use in a Rule."""
    return tuple(re.compile(regex, re.IGNORECASE) for regex in regexes)


@dataclass(frozen=True)
class Rule(Generic[C]):
    """One row of a rule table.

    Keywords are matched as lowercase substrings; patterns are searched with
    their own flags. `weight` is only used by callers that aggregate hits
    (e.g. emotional severity).
    """

    category: C
    keywords: tuple[str, ...] = ()
    patterns: tuple[re.Pattern[str], ...] = ()
    weight: float = 1.0
    label: Optional[str] = None

    def keyword_hits(self, text_lower: str) -> list[str]:
        return [k for k in self.keywords if k in text_lower]

    def pattern_hits(self, text: str) -> list[re.Pattern[str]]:
        return [p for p in self.patterns if p.search(text)]

    def occurrences(self, text: str) -> int:
        """Total number of non-overlapping pattern matches in text."""
        return sum(len(p.findall(text)) for p in self.patterns)

    def matches(self, text: str) -> bool:
        return bool(self.keyword_hits(text.lower()) or self.pattern_hits(text))


@dataclass
class RuleTable(Generic[C]):
    rules: Sequence[Rule[C]]
    default: Optional[C] = None
    name: str = field(default="rules")

    def first_match(self, text: str) -> Optional[Rule[C]]:
        for rule in self.rules:
            if rule.matches(text):
                return rule
        return None

    def classify(self, text: str) -> C:
        """Return the category of the first matching rule, else the default.

        Raises:
            LookupError: If nothing matches and the table has no default
        """
        rule = self.first_match(text)
        if rule is not None:
            return rule.category
        if self.default is None:
            raise LookupError(f"No rule in {self.name} matched and no default is set")
        return self.default

    def score(self, text: str) -> dict[C, int]:
        """Score every category; categories keep table order."""
        text_lower = text.lower()
        scores: dict[C, int] = {}
        for rule in self.rules:
            points = len(rule.keyword_hits(text_lower)) * KEYWORD_POINTS
            points += len(rule.pattern_hits(text_lower)) * PATTERN_POINTS
            scores[rule.category] = scores.get(rule.category, 0) + points
        return scores

    def best(self, text: str) -> Optional[C]:
        """Highest-scoring category, or None when nothing scored."""
        best_category: Optional[C] = None
        best_score = 0
        for category, points in self.score(text).items():
            if points > best_score:
                best_category, best_score = category, points
        return best_category

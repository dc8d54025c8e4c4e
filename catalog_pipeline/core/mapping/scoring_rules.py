"""
Scoring rules for catalog mapping suggestions.

Each rule decides whether a (source field, catalog field) pair matches and,
if so, contributes a fixed confidence and a reason. The suggester evaluates
rules as an ordered chain; adding a heuristic means adding a rule.
"""

import re
from abc import ABC, abstractmethod

from catalog_pipeline.core.models import CatalogField

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_name(name: str) -> str:
    """Lowercase and replace every non-alphanumeric character with '_'."""
    return _NON_ALNUM.sub("_", name.lower())


def name_tokens(normalized: str) -> frozenset[str]:
    return frozenset(t for t in normalized.split("_") if len(t) > 1)


class SourceName:
    """A source field name with its normalized form and tokens precomputed."""

    __slots__ = ("raw", "normalized", "tokens")

    def __init__(self, raw: str):
        self.raw = raw
        self.normalized = normalize_name(raw)
        self.tokens = name_tokens(self.normalized)


class ScoringRule(ABC):
    """
    Abstract base class for suggestion scoring rules.

    Attributes:
        confidence: Score contributed when the rule matches (0..1)
        reason: Human-readable explanation attached to the suggestion
    """

    default_confidence: float = 0.0
    reason: str = ""

    def __init__(self, confidence: float | None = None):
        self.confidence = self.default_confidence if confidence is None else confidence
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be between 0 and 1, got {self.confidence}")

    @abstractmethod
    def matches(self, source: SourceName, field: CatalogField) -> bool:
        """Return True if the rule links the source field to the catalog field."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(confidence={self.confidence})"


class ExactNameRule(ScoringRule):
    default_confidence = 1.0
    reason = "exact field name match"

    def matches(self, source: SourceName, field: CatalogField) -> bool:
        return source.normalized == normalize_name(field.name)


class NameContainmentRule(ScoringRule):
    """Either normalized name contains the other."""

    default_confidence = 0.9
    reason = "field name similarity"

    def matches(self, source: SourceName, field: CatalogField) -> bool:
        target = normalize_name(field.name)
        return source.normalized in target or target in source.normalized


class SharedTokenRule(ScoringRule):
    """
    The names share a significant underscore-separated token.

    customer_email and email_address share "email". Tokens such as "id" or
    "name" appear in too many fields to link two of them on their own.
    """

    default_confidence = 0.85
    reason = "shared name token"

    def __init__(self, generic_tokens: frozenset[str] = frozenset(), confidence: float | None = None):
        super().__init__(confidence)
        self.generic_tokens = generic_tokens

    def matches(self, source: SourceName, field: CatalogField) -> bool:
        shared = source.tokens & name_tokens(normalize_name(field.name))
        return bool(shared - self.generic_tokens)


class DisplayNameRule(ScoringRule):
    default_confidence = 0.8
    reason = "display name similarity"

    def matches(self, source: SourceName, field: CatalogField) -> bool:
        return source.normalized in normalize_name(field.display_name)


class TagRule(ScoringRule):
    """Any tag contains the source name or is contained in it."""

    default_confidence = 0.7
    reason = "tag match"

    def matches(self, source: SourceName, field: CatalogField) -> bool:
        for tag in field.tags:
            normalized_tag = normalize_name(tag)
            if normalized_tag and (
                normalized_tag in source.normalized or source.normalized in normalized_tag
            ):
                return True
        return False


class CommonPatternRule(ScoringRule):
    """Curated synonym lists per catalog field name (e.g. dob for date_of_birth)."""

    default_confidence = 0.6
    reason = "common pattern match"

    def __init__(self, patterns: dict[str, list[str]] | None = None, confidence: float | None = None):
        super().__init__(confidence)
        self.patterns = {
            name: [normalize_name(p) for p in synonyms]
            for name, synonyms in (patterns or {}).items()
        }

    def matches(self, source: SourceName, field: CatalogField) -> bool:
        for pattern in self.patterns.get(field.name, ()):
            if pattern in source.normalized or source.normalized in pattern:
                return True
        return False


def default_rules(
    patterns: dict[str, list[str]] | None = None,
    generic_tokens: frozenset[str] = frozenset(),
) -> list[ScoringRule]:
    """
    Build the standard rule chain, strongest first.

    Args:
        patterns: Common-pattern synonym table
        generic_tokens: Tokens ignored by the shared-token rule

    Returns:
        Ordered list of scoring rules
    """
    return [
        ExactNameRule(),
        NameContainmentRule(),
        SharedTokenRule(generic_tokens),
        DisplayNameRule(),
        TagRule(),
        CommonPatternRule(patterns),
    ]

"""
Catalog mapping suggester.

Proposes catalog fields for source fields by running each pair through an
ordered chain of scoring rules. Suggestions are advisory; nothing is mapped
until the caller confirms.
"""

from collections.abc import Iterable, Sequence

from catalog_pipeline.config import PipelineSettings
from catalog_pipeline.core.catalog_config import MappingPatternLoader
from catalog_pipeline.core.models import CatalogField, MappingSuggestion, SuggestedMapping
from catalog_pipeline.observability.logger import get_logger
from catalog_pipeline.observability.metrics import increment_counter, suggestions_generated_total

from .scoring_rules import ScoringRule, SourceName, default_rules

logger = get_logger(__name__)


class MappingSuggester:
    """
    Scores (source field, catalog field) pairs with a rule chain.

    For each pair the strongest matching rule wins. Candidates scoring above
    min_confidence are returned best first; equal scores keep catalog
    declaration order.
    """

    def __init__(self, rules: Sequence[ScoringRule] | None = None, min_confidence: float = 0.5):
        """
        Initialize the suggester.

        Args:
            rules: Scoring rules (defaults to the standard chain without a pattern table)
            min_confidence: Candidates must score strictly above this value
        """
        chain = list(rules) if rules is not None else default_rules()
        # Stable sort keeps declaration order among equal confidences
        self.rules = sorted(chain, key=lambda r: r.confidence, reverse=True)
        self.min_confidence = min_confidence

    @classmethod
    def from_settings(cls, settings: PipelineSettings) -> "MappingSuggester":
        """Build the standard chain with the configured pattern table and threshold."""
        loader = MappingPatternLoader(settings.mapping_patterns_path)
        return cls(
            rules=default_rules(loader.patterns, loader.generic_tokens),
            min_confidence=settings.suggestion_min_confidence,
        )

    def score(self, source_field: str, field: CatalogField) -> tuple[float, str] | None:
        """
        Score one pair.

        Returns:
            (confidence, reason) of the strongest matching rule, or None
        """
        source = SourceName(source_field)
        return self._score(source, field)

    def _score(self, source: SourceName, field: CatalogField) -> tuple[float, str] | None:
        if not source.normalized:
            return None
        for rule in self.rules:
            if rule.matches(source, field):
                return rule.confidence, rule.reason
        return None

    def suggest_for_field(
        self, source_field: str, catalog_fields: Sequence[CatalogField]
    ) -> MappingSuggestion:
        """
        Rank catalog fields for one source field.

        Args:
            source_field: Source field name
            catalog_fields: Catalog fields in declaration order

        Returns:
            MappingSuggestion with candidates best first
        """
        source = SourceName(source_field)
        candidates = []
        for field in catalog_fields:
            scored = self._score(source, field)
            if scored is None:
                continue
            confidence, reason = scored
            if confidence > self.min_confidence:
                candidates.append(
                    SuggestedMapping(
                        catalog_field_id=field.id,
                        catalog_field_name=field.name,
                        confidence=confidence,
                        reason=reason,
                    )
                )

        candidates.sort(key=lambda c: c.confidence, reverse=True)
        for candidate in candidates:
            increment_counter(suggestions_generated_total, reason=candidate.reason)

        return MappingSuggestion(source_field_name=source_field, suggested_mappings=candidates)

    def suggest(
        self, source_fields: Iterable[str], catalog_fields: Sequence[CatalogField]
    ) -> list[MappingSuggestion]:
        """
        Rank catalog fields for every source field.

        Source fields with no candidate are omitted.

        Args:
            source_fields: Source field names
            catalog_fields: Catalog fields in declaration order

        Returns:
            One MappingSuggestion per source field that has candidates
        """
        suggestions = []
        for source_field in source_fields:
            suggestion = self.suggest_for_field(source_field, catalog_fields)
            if suggestion.suggested_mappings:
                suggestions.append(suggestion)

        logger.info(
            "Generated mapping suggestions",
            extra={"catalog_field_count": len(catalog_fields), "suggested_field_count": len(suggestions)},
        )
        return suggestions

    def best_matches(
        self, source_fields: Iterable[str], catalog_fields: Sequence[CatalogField]
    ) -> dict[str, str]:
        """
        Map each source field to its best catalog field id.

        Returns:
            {source_field_name: catalog_field_id} for fields with a candidate
        """
        return {
            s.source_field_name: s.suggested_mappings[0].catalog_field_id
            for s in self.suggest(source_fields, catalog_fields)
        }

"""
Categorization Suggestion Engine.

Entry point for suggestion generation: validates input, runs the rule
catalog over every record and hands the matches to the ranker.

Usage:
    from suggestions import CategorizationSuggestionEngine

    engine = CategorizationSuggestionEngine()
    suggestions = engine.generate_suggestions(records, profile)
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from calculator.tax_year_config import TaxYearConfig
from config.settings import SuggestionSettings, get_settings
from models.ato_categories import AtoCategory
from models.records import ReceiptForSuggestion
from models.taxpayer import TaxpayerProfile

from .models import Suggestion, SuggestionFilter, SuggestionPriority, SuggestionStatus, SuggestionType
from .ranker import Clock, IdGenerator, SuggestionRanker
from .rules import ALL_SUGGESTION_RULES, RuleContext, RuleMatch, SuggestionRule, evaluate_record

logger = logging.getLogger(__name__)

RecordInput = Union[ReceiptForSuggestion, Mapping[str, Any]]
ProfileInput = Union[TaxpayerProfile, Mapping[str, Any]]


class CategorizationSuggestionEngine:
    """
    Generates ranked re-categorization suggestions.

    Holds no state between calls apart from its collaborators; the same
    engine can be reused for any number of taxpayers.
    """

    def __init__(
        self,
        settings: Optional[SuggestionSettings] = None,
        config: Optional[TaxYearConfig] = None,
        rules: Optional[Sequence[SuggestionRule]] = None,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
    ):
        self.settings = settings or get_settings()
        self.config = config or TaxYearConfig.for_year(self.settings.tax_year)
        self.rules = tuple(rules) if rules is not None else ALL_SUGGESTION_RULES
        self.ranker = SuggestionRanker(id_generator=id_generator, clock=clock)
        self._context = RuleContext(config=self.config, settings=self.settings)

    def generate_suggestions(
        self,
        records: Iterable[RecordInput],
        profile: ProfileInput,
    ) -> List[Suggestion]:
        """
        Run every rule against every record and rank the results.

        Args:
            records: Receipts/assets, as models or plain dicts
            profile: Taxpayer profile, as a model or plain dict

        Returns:
            Suggestions sorted by priority, then tax impact descending

        Raises:
            pydantic.ValidationError: On structurally invalid records or profile
            ValueError: If a benefit calculation rejects its input
        """
        start = time.perf_counter()
        profile = _to_profile(profile)
        validated = [_to_record(r) for r in records]

        matches: List[RuleMatch] = []
        for record in validated:
            matches.extend(evaluate_record(record, profile, self._context, self.rules))

        suggestions = self.ranker.rank(matches)

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Generated {len(suggestions)} suggestions from {len(validated)} records "
            f"({len(matches)} rule matches) in {elapsed_ms:.1f}ms"
        )
        return suggestions


def _to_profile(profile: ProfileInput) -> TaxpayerProfile:
    if isinstance(profile, TaxpayerProfile):
        return profile
    return TaxpayerProfile.model_validate(profile)


def _to_record(record: RecordInput) -> ReceiptForSuggestion:
    if isinstance(record, ReceiptForSuggestion):
        return record
    return ReceiptForSuggestion.model_validate(record)


def generate_suggestions(
    records: Iterable[RecordInput],
    profile: ProfileInput,
    settings: Optional[SuggestionSettings] = None,
    **engine_kwargs,
) -> List[Suggestion]:
    """Convenience wrapper building a one-off engine."""
    engine = CategorizationSuggestionEngine(settings=settings, **engine_kwargs)
    return engine.generate_suggestions(records, profile)


def filter_suggestions(
    suggestions: Iterable[Suggestion],
    criteria: Optional[Union[SuggestionFilter, Dict[str, Any]]] = None,
    **kwargs,
) -> List[Suggestion]:
    """
    Subset matching every criterion provided.

    Criteria may be a SuggestionFilter, a dict, or keyword arguments
    (status, type, priority, category). Omitted criteria match anything;
    order is preserved.
    """
    if isinstance(criteria, SuggestionFilter):
        flt = criteria
    else:
        values = dict(criteria or {})
        values.update(kwargs)
        flt = _build_filter(values)
    return [s for s in suggestions if flt.matches(s)]


def _build_filter(values: Dict[str, Any]) -> SuggestionFilter:
    unknown = set(values) - {"status", "type", "priority", "category"}
    if unknown:
        raise ValueError(f"Unknown filter fields: {sorted(unknown)}")

    def _enum(enum_cls, key):
        value = values.get(key)
        return None if value is None else enum_cls(value)

    return SuggestionFilter(
        status=_enum(SuggestionStatus, "status"),
        type=_enum(SuggestionType, "type"),
        priority=_enum(SuggestionPriority, "priority"),
        category=AtoCategory.parse(values.get("category")),
    )

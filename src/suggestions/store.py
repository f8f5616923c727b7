"""
Suggestion Store

In-memory review session for one taxpayer's suggestions: generate, then
accept/reject/ignore/reset individually or in bulk, then read back the
category changes to persist. Not thread-safe; one caller at a time.
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from calculator.decimal_math import sum_money, to_float
from config.settings import SuggestionSettings
from models.ato_categories import AtoCategory

from .analytics import calculate_review_stats, calculate_suggestion_analytics
from .engine import CategorizationSuggestionEngine, ProfileInput, RecordInput, filter_suggestions
from .exporter import export_suggestions_report
from .lifecycle import (
    accept_suggestion,
    apply_suggestion,
    ignore_suggestion,
    reject_suggestion,
    reset_suggestion,
)
from .models import (
    Confidence,
    LearningData,
    PendingChange,
    ReviewStats,
    Suggestion,
    SuggestionAnalytics,
    SuggestionFilter,
    SuggestionPriority,
    SuggestionStatus,
    SuggestionType,
)
from .ranker import utc_now

logger = logging.getLogger(__name__)


class SuggestionStore:
    """Caller-owned collection of suggestions with the review workflow."""

    def __init__(
        self,
        engine: Optional[CategorizationSuggestionEngine] = None,
        settings: Optional[SuggestionSettings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.engine = engine or CategorizationSuggestionEngine(settings=settings, clock=clock)
        self.settings = settings or self.engine.settings
        self.clock = clock or utc_now
        self._suggestions: List[Suggestion] = []
        self.last_generated_at: Optional[datetime] = None

    # =========================================================================
    # GENERATION
    # =========================================================================

    def generate(self, records: Iterable[RecordInput], profile: ProfileInput) -> List[Suggestion]:
        """Replace the store's contents with freshly generated suggestions."""
        self._suggestions = self.engine.generate_suggestions(records, profile)
        self.last_generated_at = self.clock()
        return list(self._suggestions)

    def load(self, suggestions: Iterable[Suggestion]) -> None:
        """Replace contents with previously generated suggestions."""
        self._suggestions = list(suggestions)

    def clear(self) -> None:
        self._suggestions = []
        self.last_generated_at = None

    def __len__(self) -> int:
        return len(self._suggestions)

    def __iter__(self):
        return iter(list(self._suggestions))

    @property
    def suggestions(self) -> List[Suggestion]:
        return list(self._suggestions)

    # =========================================================================
    # SINGLE SUGGESTION
    # =========================================================================

    def get(self, suggestion_id: str) -> Suggestion:
        """
        Raises:
            KeyError: If no suggestion has this id
        """
        for suggestion in self._suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        raise KeyError(f"Suggestion not found: {suggestion_id}")

    def accept(self, suggestion_id: str) -> Suggestion:
        return accept_suggestion(self.get(suggestion_id), self.clock)

    def reject(self, suggestion_id: str) -> Suggestion:
        return reject_suggestion(self.get(suggestion_id), self.clock)

    def ignore(self, suggestion_id: str) -> Suggestion:
        return ignore_suggestion(self.get(suggestion_id), self.clock)

    def reset(self, suggestion_id: str) -> Suggestion:
        return reset_suggestion(self.get(suggestion_id))

    # =========================================================================
    # BULK OPERATIONS (pending suggestions only)
    # =========================================================================

    def _bulk(self, transition, predicate=None) -> int:
        targets = [
            s for s in self._suggestions
            if s.status is SuggestionStatus.PENDING and (predicate is None or predicate(s))
        ]
        for suggestion in targets:
            transition(suggestion, self.clock)
        return len(targets)

    def accept_all(self) -> int:
        return self._bulk(accept_suggestion)

    def reject_all(self) -> int:
        return self._bulk(reject_suggestion)

    def accept_by_type(self, suggestion_type: SuggestionType) -> int:
        suggestion_type = SuggestionType(suggestion_type)
        return self._bulk(accept_suggestion, lambda s: s.suggestion_type is suggestion_type)

    def accept_by_priority(self, priority: SuggestionPriority) -> int:
        priority = SuggestionPriority(priority)
        return self._bulk(accept_suggestion, lambda s: s.priority is priority)

    def accept_high_confidence(self) -> int:
        return self._bulk(accept_suggestion, lambda s: s.confidence is Confidence.HIGH)

    # =========================================================================
    # VIEWS
    # =========================================================================

    def _with_status(self, status: SuggestionStatus) -> List[Suggestion]:
        return [s for s in self._suggestions if s.status is status]

    @property
    def pending(self) -> List[Suggestion]:
        return self._with_status(SuggestionStatus.PENDING)

    @property
    def accepted(self) -> List[Suggestion]:
        return self._with_status(SuggestionStatus.ACCEPTED)

    @property
    def rejected(self) -> List[Suggestion]:
        return self._with_status(SuggestionStatus.REJECTED)

    @property
    def ignored(self) -> List[Suggestion]:
        return self._with_status(SuggestionStatus.IGNORED)

    @property
    def high_impact(self) -> List[Suggestion]:
        threshold = self.settings.high_impact_threshold
        return [s for s in self._suggestions if abs(s.tax_impact) > threshold]

    def filtered(self, criteria: Optional[SuggestionFilter] = None, **kwargs) -> List[Suggestion]:
        return filter_suggestions(self._suggestions, criteria, **kwargs)

    def group_by_type(self) -> Dict[SuggestionType, List[Suggestion]]:
        groups: Dict[SuggestionType, List[Suggestion]] = defaultdict(list)
        for s in self._suggestions:
            groups[s.suggestion_type].append(s)
        return dict(groups)

    def group_by_priority(self) -> Dict[SuggestionPriority, List[Suggestion]]:
        groups: Dict[SuggestionPriority, List[Suggestion]] = defaultdict(list)
        for s in self._suggestions:
            groups[s.priority].append(s)
        return dict(groups)

    def group_by_category(self) -> Dict[AtoCategory, List[Suggestion]]:
        """Grouped by suggested category."""
        groups: Dict[AtoCategory, List[Suggestion]] = defaultdict(list)
        for s in self._suggestions:
            groups[s.suggested_category].append(s)
        return dict(groups)

    # =========================================================================
    # SAVINGS (positive impacts only)
    # =========================================================================

    @staticmethod
    def _savings(suggestions: Iterable[Suggestion]) -> float:
        return to_float(sum_money(s.tax_impact for s in suggestions if s.tax_impact > 0))

    @property
    def total_potential_savings(self) -> float:
        return self._savings(self._suggestions)

    @property
    def accepted_savings(self) -> float:
        return self._savings(self.accepted)

    @property
    def pending_savings(self) -> float:
        return self._savings(self.pending)

    # =========================================================================
    # OUTPUTS
    # =========================================================================

    def pending_changes(self) -> List[PendingChange]:
        """Category changes for every accepted suggestion, for the caller to persist."""
        changes = []
        for s in self.accepted:
            applied = apply_suggestion(s)
            changes.append(PendingChange(record_id=s.record_id, new_category=applied.category, notes=applied.notes))
        return changes

    def learning_data(self) -> LearningData:
        return LearningData(
            accepted_patterns=[s.pattern for s in self.accepted],
            rejected_patterns=[s.pattern for s in self.rejected],
        )

    def analytics(self) -> SuggestionAnalytics:
        return calculate_suggestion_analytics(self._suggestions)

    def review_stats(self) -> ReviewStats:
        return calculate_review_stats(self._suggestions)

    def export_report(self) -> str:
        return export_suggestions_report(self._suggestions)

"""
Categorization suggestions.

Reviews already-categorized expenses and assets and proposes ATO category
changes that improve the tax outcome or fix compliance problems.
"""

from .models import (
    AppliedCategory,
    Confidence,
    LearningData,
    MatchStrength,
    PendingChange,
    ReviewStats,
    Suggestion,
    SuggestionAnalytics,
    SuggestionFilter,
    SuggestionPriority,
    SuggestionStatus,
    SuggestionType,
)
from .asset_classifier import AssetClassification, find_asset_keyword, is_depreciable_asset
from .rules import ALL_SUGGESTION_RULES, RuleContext, RuleMatch, SuggestionRule, get_rule
from .ranker import SequentialIdGenerator, SuggestionRanker, TimeOrderedIdGenerator, sort_suggestions
from .engine import CategorizationSuggestionEngine, filter_suggestions, generate_suggestions
from .lifecycle import (
    SuggestionTransitionError,
    accept_suggestion,
    apply_suggestion,
    can_transition,
    ignore_suggestion,
    reject_suggestion,
    reset_suggestion,
)
from .analytics import calculate_review_stats, calculate_suggestion_analytics
from .exporter import export_suggestions_report
from .store import SuggestionStore

__all__ = [
    # Models
    "AppliedCategory",
    "Confidence",
    "LearningData",
    "MatchStrength",
    "PendingChange",
    "ReviewStats",
    "Suggestion",
    "SuggestionAnalytics",
    "SuggestionFilter",
    "SuggestionPriority",
    "SuggestionStatus",
    "SuggestionType",
    # Classification and rules
    "AssetClassification",
    "find_asset_keyword",
    "is_depreciable_asset",
    "ALL_SUGGESTION_RULES",
    "RuleContext",
    "RuleMatch",
    "SuggestionRule",
    "get_rule",
    # Generation
    "CategorizationSuggestionEngine",
    "SequentialIdGenerator",
    "SuggestionRanker",
    "TimeOrderedIdGenerator",
    "filter_suggestions",
    "generate_suggestions",
    "sort_suggestions",
    # Lifecycle
    "SuggestionTransitionError",
    "accept_suggestion",
    "apply_suggestion",
    "can_transition",
    "ignore_suggestion",
    "reject_suggestion",
    "reset_suggestion",
    # Reporting
    "calculate_review_stats",
    "calculate_suggestion_analytics",
    "export_suggestions_report",
    "SuggestionStore",
]

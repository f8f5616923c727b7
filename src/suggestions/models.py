"""
Suggestion Models - Data Classes

Value types shared by the rule catalog, ranker, lifecycle store and
analytics.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from enum import Enum

from models.ato_categories import AtoCategory, category_label

# Tolerance for the tax_impact == suggested - current invariant
IMPACT_TOLERANCE = 1e-6


class SuggestionType(str, Enum):
    """Kinds of re-categorization the engine proposes."""
    MOVE_TO_POOL = "move_to_pool"                # D5 -> D6 low-value pool
    SETUP_DEPRECIATION = "setup_depreciation"    # Large immediate claim -> depreciate
    SWITCH_TO_IMMEDIATE = "switch_to_immediate"  # Pooled item under $300 -> claim outright
    RECATEGORIZE = "recategorize"                # Better-fitting category by description
    MISSING_DEPRECIATION = "missing_depreciation"  # Large asset with no schedule


class SuggestionStatus(str, Enum):
    """Review status of a suggestion."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    IGNORED = "ignored"

    @property
    def is_terminal(self) -> bool:
        return self is not SuggestionStatus.PENDING


class SuggestionPriority(str, Enum):
    """Priority levels, ranked critical first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


PRIORITY_RANK = {
    SuggestionPriority.CRITICAL: 0,
    SuggestionPriority.HIGH: 1,
    SuggestionPriority.MEDIUM: 2,
    SuggestionPriority.LOW: 3,
}


class Confidence(str, Enum):
    """How sure the engine is that the classification is right."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MatchStrength(str, Enum):
    """How specific the evidence behind a rule match was."""
    EXACT = "exact"          # Category and amount thresholds alone decide it
    KEYWORD = "keyword"      # A known keyword identified the item
    HEURISTIC = "heuristic"  # Generic fallback (e.g. "anything over $300 is an asset")


@dataclass
class Suggestion:
    """
    A recommended re-categorization of one record.

    Created by the ranker; status and reviewed_at change only through
    suggestions.lifecycle.
    """
    id: str
    record_id: Any
    current_category: Optional[AtoCategory]
    suggested_category: AtoCategory
    suggestion_type: SuggestionType
    title: str
    description: str
    reason: str

    # Tax impact
    current_tax_benefit: float
    suggested_tax_benefit: float
    tax_impact: float  # Positive = better

    # Financial details
    amount: float
    item_description: str

    confidence: Confidence
    priority: SuggestionPriority
    rule_id: str

    status: SuggestionStatus = SuggestionStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)
    reviewed_at: Optional[datetime] = None
    ato_reference: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def current_category_label(self) -> str:
        return category_label(self.current_category)

    @property
    def impact_is_consistent(self) -> bool:
        expected = self.suggested_tax_benefit - self.current_tax_benefit
        return abs(self.tax_impact - expected) <= IMPACT_TOLERANCE

    @property
    def pattern(self) -> str:
        """type:current:suggested, used for accept/reject learning data."""
        return f"{self.suggestion_type.value}:{self.current_category_label}:{self.suggested_category.value}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "record_id": self.record_id,
            "current_category": self.current_category_label,
            "suggested_category": self.suggested_category.value,
            "suggestion_type": self.suggestion_type.value,
            "title": self.title,
            "description": self.description,
            "reason": self.reason,
            "current_tax_benefit": round(self.current_tax_benefit, 2),
            "suggested_tax_benefit": round(self.suggested_tax_benefit, 2),
            "tax_impact": round(self.tax_impact, 2),
            "amount": self.amount,
            "item_description": self.item_description,
            "confidence": self.confidence.value,
            "priority": self.priority.value,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "ato_reference": self.ato_reference,
            "rule_id": self.rule_id,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class SuggestionFilter:
    """Conjunction of optional criteria; None means "any"."""
    status: Optional[SuggestionStatus] = None
    type: Optional[SuggestionType] = None
    priority: Optional[SuggestionPriority] = None
    category: Optional[AtoCategory] = None  # Suggested category

    @property
    def is_active(self) -> bool:
        return any(v is not None for v in (self.status, self.type, self.priority, self.category))

    def matches(self, suggestion: Suggestion) -> bool:
        if self.status is not None and suggestion.status != self.status:
            return False
        if self.type is not None and suggestion.suggestion_type != self.type:
            return False
        if self.priority is not None and suggestion.priority != self.priority:
            return False
        if self.category is not None and suggestion.suggested_category != self.category:
            return False
        return True


@dataclass(frozen=True)
class AppliedCategory:
    """Result of applying a suggestion; the caller persists it."""
    category: AtoCategory
    notes: str


@dataclass
class SuggestionAnalytics:
    """Roll-up of a suggestion collection."""
    total_suggestions: int
    pending_count: int
    accepted_count: int
    rejected_count: int
    ignored_count: int
    total_tax_impact: float
    accepted_tax_impact: float
    by_type: Dict[SuggestionType, int]
    by_priority: Dict[SuggestionPriority, int]
    high_confidence_rate: float  # Percentage, 0-100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_suggestions": self.total_suggestions,
            "pending_count": self.pending_count,
            "accepted_count": self.accepted_count,
            "rejected_count": self.rejected_count,
            "ignored_count": self.ignored_count,
            "total_tax_impact": round(self.total_tax_impact, 2),
            "accepted_tax_impact": round(self.accepted_tax_impact, 2),
            "by_type": {k.value: v for k, v in self.by_type.items()},
            "by_priority": {k.value: v for k, v in self.by_priority.items()},
            "high_confidence_rate": round(self.high_confidence_rate, 2),
        }


@dataclass
class ReviewStats:
    """Progress of the taxpayer's review, as percentages."""
    total: int
    pending: int
    accepted: int
    rejected: int
    ignored: int
    pending_percentage: float
    accepted_percentage: float
    processed_percentage: float
    total_savings: float
    average_savings: float
    high_confidence_count: int
    high_confidence_percentage: float


@dataclass(frozen=True)
class PendingChange:
    """A category change the caller should write back to a record."""
    record_id: Any
    new_category: AtoCategory
    notes: str


@dataclass
class LearningData:
    """Accepted/rejected patterns for tuning future suggestions."""
    accepted_patterns: List[str] = field(default_factory=list)
    rejected_patterns: List[str] = field(default_factory=list)

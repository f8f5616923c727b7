"""Roll-ups over a suggestion collection."""

from collections import Counter
from typing import Iterable

from calculator.decimal_math import HUNDRED, ZERO, divide, money, multiply, sum_money, to_float

from .models import (
    Confidence,
    ReviewStats,
    SuggestionAnalytics,
    SuggestionPriority,
    SuggestionStatus,
    SuggestionType,
)


def _percentage(part: int, whole: int) -> float:
    return to_float(multiply(divide(part, whole, default=ZERO), HUNDRED))


def calculate_suggestion_analytics(suggestions: Iterable) -> SuggestionAnalytics:
    """
    Counts per status, type and priority, total and accepted impact, and
    the share of high-confidence suggestions.

    Every suggestion type and priority is present in the result, with 0
    where none occur.
    """
    items = list(suggestions)
    statuses = Counter(s.status for s in items)
    types = Counter(s.suggestion_type for s in items)
    priorities = Counter(s.priority for s in items)
    high = sum(1 for s in items if s.confidence is Confidence.HIGH)

    return SuggestionAnalytics(
        total_suggestions=len(items),
        pending_count=statuses[SuggestionStatus.PENDING],
        accepted_count=statuses[SuggestionStatus.ACCEPTED],
        rejected_count=statuses[SuggestionStatus.REJECTED],
        ignored_count=statuses[SuggestionStatus.IGNORED],
        total_tax_impact=to_float(sum_money(s.tax_impact for s in items)),
        accepted_tax_impact=to_float(
            sum_money(s.tax_impact for s in items if s.status is SuggestionStatus.ACCEPTED)
        ),
        by_type={t: types[t] for t in SuggestionType},
        by_priority={p: priorities[p] for p in SuggestionPriority},
        high_confidence_rate=_percentage(high, len(items)),
    )


def calculate_review_stats(suggestions: Iterable) -> ReviewStats:
    """Review progress; savings count positive impacts only."""
    items = list(suggestions)
    total = len(items)
    statuses = Counter(s.status for s in items)
    pending = statuses[SuggestionStatus.PENDING]
    accepted = statuses[SuggestionStatus.ACCEPTED]
    high = sum(1 for s in items if s.confidence is Confidence.HIGH)

    savings = sum_money(s.tax_impact for s in items if s.tax_impact > 0)

    return ReviewStats(
        total=total,
        pending=pending,
        accepted=accepted,
        rejected=statuses[SuggestionStatus.REJECTED],
        ignored=statuses[SuggestionStatus.IGNORED],
        pending_percentage=_percentage(pending, total),
        accepted_percentage=_percentage(accepted, total),
        processed_percentage=_percentage(total - pending, total),
        total_savings=to_float(savings),
        average_savings=to_float(money(divide(savings, total, default=ZERO))),
        high_confidence_count=high,
        high_confidence_percentage=_percentage(high, total),
    )

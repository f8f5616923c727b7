"""Plain-text suggestions report."""

from datetime import datetime
from typing import Iterable, List, Optional

from calculator.decimal_math import format_money

from .analytics import calculate_suggestion_analytics
from .models import Suggestion

REPORT_TITLE = "CATEGORIZATION SUGGESTIONS REPORT"
RULE_WIDTH = 60


def format_suggestion_line(suggestion: Suggestion) -> str:
    """[PRIORITY] item (amount): current → suggested, impact [status]"""
    return (
        f"[{suggestion.priority.value.upper()}] {suggestion.item_description} "
        f"({format_money(suggestion.amount)}): "
        f"{suggestion.current_category_label} → {suggestion.suggested_category.value}, "
        f"impact {format_money(suggestion.tax_impact)} [{suggestion.status.value}]"
    )


def export_suggestions_report(
    suggestions: Iterable[Suggestion],
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render suggestions as a text report, one line each, in the order given.

    The output depends only on the arguments; pass generated_at to stamp
    the report.
    """
    items = list(suggestions)
    analytics = calculate_suggestion_analytics(items)

    lines: List[str] = [REPORT_TITLE]
    if generated_at is not None:
        lines.append(f"Generated: {generated_at.isoformat()}")
    lines.append("=" * RULE_WIDTH)

    if items:
        lines.extend(format_suggestion_line(s) for s in items)
    else:
        lines.append("No suggestions.")

    lines.append("-" * RULE_WIDTH)
    lines.append(f"Total suggestions: {analytics.total_suggestions}")
    lines.append(
        f"Pending: {analytics.pending_count}  Accepted: {analytics.accepted_count}  "
        f"Rejected: {analytics.rejected_count}  Ignored: {analytics.ignored_count}"
    )
    lines.append(f"Total tax impact: {format_money(analytics.total_tax_impact)}")
    lines.append(f"Accepted tax impact: {format_money(analytics.accepted_tax_impact)}")
    return "\n".join(lines) + "\n"

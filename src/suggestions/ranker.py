"""
Suggestion Ranker.

Turns rule matches into Suggestion values: assigns ids and timestamps,
derives confidence, drops matches whose rule needs a positive impact, and
sorts critical-first with larger impacts ahead within a priority.
"""

import itertools
import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from .models import Confidence, MatchStrength, Suggestion
from .rules import RuleMatch

logger = logging.getLogger(__name__)

IdGenerator = Callable[[], str]
Clock = Callable[[], datetime]

ID_PREFIX = "sugg"


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


class TimeOrderedIdGenerator:
    """
    sugg-<epoch ms>-<sequence>-<random>.

    The sequence keeps ids created within the same millisecond ordered and
    unique.
    """

    def __init__(self, time_source: Callable[[], float] = time.time):
        self._time_source = time_source
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        millis = int(self._time_source() * 1000)
        return f"{ID_PREFIX}-{millis}-{next(self._counter):06d}-{secrets.token_hex(4)}"


class SequentialIdGenerator:
    """sugg-0001, sugg-0002, ... Deterministic, for tests and replays."""

    def __init__(self, start: int = 1, width: int = 4):
        self._counter = itertools.count(start)
        self._width = width

    def __call__(self) -> str:
        return f"{ID_PREFIX}-{next(self._counter):0{self._width}d}"


_default_generator = TimeOrderedIdGenerator()


def generate_suggestion_id() -> str:
    """One-off time-ordered id."""
    return _default_generator()


def derive_confidence(match: RuleMatch) -> Confidence:
    """Confidence stated by the rule, else from how specific the match was."""
    if match.confidence is not None:
        return match.confidence
    if match.match_strength in (MatchStrength.EXACT, MatchStrength.KEYWORD):
        return Confidence.HIGH
    return Confidence.MEDIUM


def is_reportable(match: RuleMatch) -> bool:
    """Optimization rules only surface when they actually help."""
    return not match.rule.requires_positive_impact or match.tax_impact > 0


def sort_suggestions(suggestions: Iterable[Suggestion]) -> List[Suggestion]:
    """Priority rank ascending, then tax impact descending. Stable."""
    return sorted(suggestions, key=lambda s: (s.priority.rank, -s.tax_impact))


class SuggestionRanker:
    """Builds and orders suggestions from rule matches."""

    def __init__(self, id_generator: Optional[IdGenerator] = None, clock: Optional[Clock] = None):
        self.id_generator = id_generator or TimeOrderedIdGenerator()
        self.clock = clock or utc_now

    def create_suggestion(self, match: RuleMatch) -> Suggestion:
        """Build a pending suggestion from a match."""
        record = match.record
        return Suggestion(
            id=self.id_generator(),
            record_id=record.id,
            current_category=match.current_category,
            suggested_category=match.suggested_category,
            suggestion_type=match.rule.type,
            title=match.title,
            description=match.description,
            reason=match.reason,
            current_tax_benefit=match.current_benefit,
            suggested_tax_benefit=match.suggested_benefit,
            tax_impact=match.tax_impact,
            amount=record.amount,
            item_description=record.description or record.vendor,
            confidence=derive_confidence(match),
            priority=match.priority,
            rule_id=match.rule.rule_id,
            created_at=self.clock(),
            ato_reference=match.rule.ato_reference,
            metadata={**match.metadata, "ato_reference": match.rule.ato_reference},
        )

    def rank(self, matches: Iterable[RuleMatch]) -> List[Suggestion]:
        """
        Filter, build and sort.

        Ids are assigned in evaluation order (record order, then catalog
        order), before sorting.
        """
        suggestions = []
        dropped = 0
        for match in matches:
            if not is_reportable(match):
                dropped += 1
                continue
            suggestions.append(self.create_suggestion(match))

        if dropped:
            logger.debug(f"Dropped {dropped} matches with no positive tax impact")
        return sort_suggestions(suggestions)

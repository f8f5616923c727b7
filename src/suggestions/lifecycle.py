"""
Suggestion Lifecycle

State machine for reviewing suggestions:
- PENDING: as created by the engine
- ACCEPTED / REJECTED / IGNORED: reviewed by the taxpayer
- reset returns any reviewed suggestion to PENDING

Transitions mutate the suggestion in place and stamp reviewed_at.
Persisting the change, or the category change it implies, belongs to the
caller.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, FrozenSet, Optional

from .models import AppliedCategory, Suggestion, SuggestionStatus
from .ranker import utc_now

logger = logging.getLogger(__name__)


class SuggestionTransitionError(Exception):
    """Raised when an invalid status transition is attempted."""
    def __init__(self, message: str, suggestion_id: str, current_status: SuggestionStatus, target_status: SuggestionStatus):
        self.suggestion_id = suggestion_id
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(message)


_REVIEWED = frozenset({SuggestionStatus.ACCEPTED, SuggestionStatus.REJECTED, SuggestionStatus.IGNORED})

# Valid status transitions
VALID_TRANSITIONS: Dict[SuggestionStatus, FrozenSet[SuggestionStatus]] = {
    SuggestionStatus.PENDING: _REVIEWED,
    SuggestionStatus.ACCEPTED: frozenset({SuggestionStatus.PENDING}),
    SuggestionStatus.REJECTED: frozenset({SuggestionStatus.PENDING}),
    SuggestionStatus.IGNORED: frozenset({SuggestionStatus.PENDING}),
}


def can_transition(current: SuggestionStatus, target: SuggestionStatus) -> bool:
    """Check if a transition is valid."""
    return target in VALID_TRANSITIONS.get(current, frozenset())


def _transition(
    suggestion: Suggestion,
    target: SuggestionStatus,
    clock: Optional[Callable[[], datetime]],
) -> Suggestion:
    current = suggestion.status
    if not can_transition(current, target):
        logger.warning(
            f"Rejected transition for suggestion {suggestion.id}: {current.value} -> {target.value}"
        )
        raise SuggestionTransitionError(
            f"Cannot move suggestion {suggestion.id} from {current.value} to {target.value}",
            suggestion_id=suggestion.id,
            current_status=current,
            target_status=target,
        )

    suggestion.status = target
    suggestion.reviewed_at = (clock or utc_now)() if target.is_terminal else None

    logger.info(f"Suggestion {suggestion.id} {current.value} -> {target.value}")
    return suggestion


def accept_suggestion(suggestion: Suggestion, clock: Optional[Callable[[], datetime]] = None) -> Suggestion:
    """Mark a pending suggestion accepted."""
    return _transition(suggestion, SuggestionStatus.ACCEPTED, clock)


def reject_suggestion(suggestion: Suggestion, clock: Optional[Callable[[], datetime]] = None) -> Suggestion:
    """Mark a pending suggestion rejected."""
    return _transition(suggestion, SuggestionStatus.REJECTED, clock)


def ignore_suggestion(suggestion: Suggestion, clock: Optional[Callable[[], datetime]] = None) -> Suggestion:
    """Mark a pending suggestion ignored."""
    return _transition(suggestion, SuggestionStatus.IGNORED, clock)


def reset_suggestion(suggestion: Suggestion) -> Suggestion:
    """Return a reviewed suggestion to pending and clear reviewed_at."""
    return _transition(suggestion, SuggestionStatus.PENDING, None)


def apply_suggestion(suggestion: Suggestion) -> AppliedCategory:
    """
    Category change implied by a suggestion.

    Pure: neither the suggestion nor any record is modified.
    """
    return AppliedCategory(
        category=suggestion.suggested_category,
        notes=f"{suggestion.id} — {suggestion.reason}",
    )

"""
Warning Escalation Tracker

States:
- CLEAR      count == 0
- WARNED     1 <= count < 3
- ESCALATED  count reached 3 and not cleared since

Escalation is advisory only. Deactivation is a separate, explicit
action whose feedback payload is validated here before it reaches the
deactivation sink.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from ambassador_tracking.compliance.compliance_models import WarningLevel, WarningState
from ambassador_tracking.utils.logger import get_logger

logger = get_logger(__name__)

ESCALATION_THRESHOLD = 3
RATING_MIN = 0
RATING_MAX = 10


# ------------------------------------------------------------
# Transitions (pure)
# ------------------------------------------------------------
def level(state: WarningState) -> WarningLevel:
    if state.escalated or state.count >= ESCALATION_THRESHOLD:
        return WarningLevel.ESCALATED
    if state.count == 0:
        return WarningLevel.CLEAR
    return WarningLevel.WARNED


def is_paused(state: WarningState, on: date) -> bool:
    return state.paused_until is not None and on < state.paused_until


def increment(state: WarningState, on: date) -> WarningState:
    """Add one warning unless `on` falls inside the pause window."""
    if is_paused(state, on):
        return state

    count = state.count + 1
    return replace(
        state,
        count=count,
        escalated=state.escalated or count >= ESCALATION_THRESHOLD,
    )


def clear(state: WarningState) -> WarningState:
    return replace(state, count=0, escalated=False)


def pause(state: WarningState, until: date) -> WarningState:
    """Suspend increments until `until`; count and escalation are untouched."""
    return replace(state, paused_until=until)


class WarningTracker:
    """Per-ambassador warning states, changed only through explicit transitions."""

    def __init__(self, states: Iterable[WarningState] = ()):
        self._states: Dict[str, WarningState] = {s.ambassador_id: s for s in states}

    def state(self, ambassador_id: str) -> WarningState:
        return self._states.get(ambassador_id) or WarningState(ambassador_id=ambassador_id)

    def load(self, state: WarningState) -> None:
        """Replace one ambassador's state with what the warning store reports."""
        self._states[state.ambassador_id] = state

    def increment(self, ambassador_id: str, on: date) -> WarningState:
        before = self.state(ambassador_id)
        after = increment(before, on)

        if after is before:
            logger.info(
                "Warning for %s ignored: paused until %s",
                ambassador_id, before.paused_until,
            )
            return before

        self._states[ambassador_id] = after
        if after.escalated and not before.escalated:
            logger.warning("Ambassador %s escalated at %d warnings", ambassador_id, after.count)
        else:
            logger.info("Ambassador %s warnings=%d", ambassador_id, after.count)
        return after

    def clear(self, ambassador_id: str) -> WarningState:
        after = clear(self.state(ambassador_id))
        self._states[ambassador_id] = after
        logger.info("Warnings cleared for %s", ambassador_id)
        return after

    def pause(self, ambassador_id: str, until: date) -> WarningState:
        after = pause(self.state(ambassador_id), until)
        self._states[ambassador_id] = after
        logger.info("Warnings paused for %s until %s", ambassador_id, until)
        return after

    def states(self) -> List[WarningState]:
        return list(self._states.values())


def active_warnings(states: Iterable[WarningState]) -> int:
    return sum(1 for s in states if s.count > 0)


# ------------------------------------------------------------
# Deactivation feedback
# ------------------------------------------------------------
class DeactivationError(ValueError):
    """Deactivation request rejected before reaching the sink."""

    def __init__(self, ambassador_id: str, errors: List[str]):
        self.ambassador_id = ambassador_id
        self.errors = errors
        super().__init__(f"Cannot deactivate {ambassador_id}: " + "; ".join(errors))


@dataclass(frozen=True)
class DeactivationRequest:
    ambassador_id: str
    reason: Optional[str] = None
    rating: Optional[int] = None
    note: Optional[str] = None


def validate_deactivation(
    request: DeactivationRequest,
    when: datetime,
    currently_active: bool = True,
) -> Optional[Dict[str, Any]]:
    """
    Sink payload for a deactivation, or None when there is nothing to send.

    An already-inactive ambassador needs no feedback. For an active one
    the reason must be non-blank and the rating an integer in 0..10.

    :raises DeactivationError: listing every problem found.
    """
    if not currently_active:
        return None

    errors: List[str] = []
    reason = (request.reason or "").strip()
    rating = request.rating

    if not reason:
        errors.append("reason is required")

    if rating is None:
        errors.append("rating is required")
    elif isinstance(rating, bool) or not isinstance(rating, int):
        errors.append(f"rating must be an integer, got {rating!r}")
    elif not RATING_MIN <= rating <= RATING_MAX:
        errors.append(f"rating must be between {RATING_MIN} and {RATING_MAX}, got {rating}")

    if errors:
        raise DeactivationError(request.ambassador_id, errors)

    payload: Dict[str, Any] = {
        "reason": reason,
        "rating": rating,
        "date": when.isoformat(),
    }
    if request.note and request.note.strip():
        payload["note"] = request.note.strip()
    return payload

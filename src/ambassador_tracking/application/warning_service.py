from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Protocol

from ambassador_tracking.compliance.compliance_models import WarningState
from ambassador_tracking.compliance.warning_tracker import (
    DeactivationRequest,
    WarningTracker,
    validate_deactivation,
)
from ambassador_tracking.utils.logger import get_logger

log = get_logger(__name__)


class WarningStore(Protocol):
    def clear_warnings(self, ambassador_id: str) -> None: ...

    def pause_warnings(self, ambassador_id: str, until: date) -> None: ...

    def read_state(self, ambassador_id: str) -> Dict[str, Any]: ...


class DeactivationSink(Protocol):
    def deactivate(self, ambassador_id: str, payload: Dict[str, Any]) -> None: ...


class WarningService:
    """
    Maps tracker transitions onto the external warning store and gates
    deactivation on a valid feedback payload.
    """

    def __init__(self, store: WarningStore, sink: DeactivationSink, tracker: Optional[WarningTracker] = None):
        self.store = store
        self.sink = sink
        self.tracker = tracker or WarningTracker()

    def sync(self, ambassador_id: str) -> WarningState:
        """Pull the store's view of one ambassador into the tracker."""
        raw = self.store.read_state(ambassador_id)
        state = WarningState(
            ambassador_id=ambassador_id,
            count=max(int(raw.get("count") or 0), 0),
            paused_until=self.tracker.state(ambassador_id).paused_until,
            escalated=bool(raw.get("escalated")),
        )
        self.tracker.load(state)
        return state

    def clear(self, ambassador_id: str) -> WarningState:
        self.store.clear_warnings(ambassador_id)
        return self.tracker.clear(ambassador_id)

    def pause(self, ambassador_id: str, until: date) -> WarningState:
        self.store.pause_warnings(ambassador_id, until)
        return self.tracker.pause(ambassador_id, until)

    def deactivate(
        self,
        request: DeactivationRequest,
        when: datetime,
        currently_active: bool = True,
    ) -> Optional[Dict[str, Any]]:
        """
        Validate locally, then hand off to the sink.

        Returns None without touching the sink when the ambassador is
        already inactive.

        :raises DeactivationError: invalid payload; the sink is not called.
        """
        payload = validate_deactivation(request, when, currently_active=currently_active)
        if payload is None:
            log.info("Ambassador %s already inactive, nothing to submit", request.ambassador_id)
            return None

        try:
            self.sink.deactivate(request.ambassador_id, payload)
        except Exception:
            log.error("Deactivation of %s failed", request.ambassador_id, exc_info=True)
            raise

        log.info("Ambassador %s deactivated", request.ambassador_id)
        return payload

from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

from ambassador_tracking.compliance.compliance_models import AmbassadorRecord, TeamRecord
from ambassador_tracking.utils.config import settings
from ambassador_tracking.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RosterSnapshot:
    """Complete, immutable roster as of one successful fetch."""
    records: Tuple[AmbassadorRecord, ...]
    teams: Tuple[TeamRecord, ...]
    fetched_at: datetime
    token: int = 0


class RosterRefresh:
    """
    Holds the current roster snapshot for a view session.

    Rules:
    - Every fetch takes a token from begin(); tokens only increase
    - A snapshot is committed only if its token is newer than the
      last committed one (last request wins)
    - A failed fetch leaves the last good snapshot in place
    - A new fetch is due once `interval_seconds` have passed since the
      last commit (settings.refresh_interval_seconds by default)
    """

    def __init__(self, interval_seconds: Optional[int] = None):
        self._tokens = itertools.count(1)
        self._current: Optional[RosterSnapshot] = None
        self.interval = timedelta(
            seconds=interval_seconds if interval_seconds is not None else settings.refresh_interval_seconds
        )

    @property
    def current(self) -> Optional[RosterSnapshot]:
        return self._current

    def begin(self) -> int:
        return next(self._tokens)

    def due(self, now: Optional[datetime] = None) -> bool:
        """True when no snapshot exists yet or the current one is older than the interval."""
        if self._current is None:
            return True
        now = now or datetime.now(timezone.utc)
        return now - self._current.fetched_at >= self.interval

    def commit(
        self,
        token: int,
        records,
        teams,
        fetched_at: Optional[datetime] = None,
    ) -> bool:
        """Swap in a new snapshot; returns False when the response is stale."""
        if self._current is not None and token <= self._current.token:
            logger.warning(
                "Discarding stale roster response | token=%d current=%d",
                token, self._current.token,
            )
            return False

        self._current = RosterSnapshot(
            records=tuple(records),
            teams=tuple(teams),
            fetched_at=fetched_at or datetime.now(timezone.utc),
            token=token,
        )
        logger.info(
            "Roster snapshot committed | token=%d records=%d teams=%d",
            token, len(self._current.records), len(self._current.teams),
        )
        return True

    def refresh(self, fetch: Callable[[], Tuple[list, list]]) -> Optional[RosterSnapshot]:
        """
        Run one synchronous fetch-and-commit cycle.

        `fetch` returns (records, teams). Its exceptions propagate to the
        caller unchanged and the previous snapshot is kept.
        """
        token = self.begin()
        try:
            records, teams = fetch()
        except Exception:
            logger.error("Roster fetch failed | token=%d", token, exc_info=True)
            raise

        self.commit(token, records, teams)
        return self._current

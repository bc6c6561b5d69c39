"""
Filter/Sort pipeline over a roster snapshot.

`view()` is a pure function: the snapshot is never mutated, so the same
cached records can be re-filtered as the query changes without a refetch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Sequence

from ambassador_tracking.compliance.compliance_models import (
    AmbassadorRecord,
    TeamRecord,
)
from ambassador_tracking.compliance.evaluator import met_count

ALL = "all"

SORT_ORDERS = ("asc", "desc")
STATUS_FILTERS = (ALL, "active", "inactive")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _last_upload(record: AmbassadorRecord) -> datetime:
    ts = record.last_activity
    if ts is None:
        return _EPOCH
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


SORT_KEYS: Dict[str, Callable[[AmbassadorRecord], object]] = {
    "name": lambda r: r.name.lower(),
    "activity": lambda r: r.actual.total,
    "activities": lambda r: r.actual.total,
    "compliance": lambda r: met_count(r.verdicts),
    "lastUpload": _last_upload,
}


@dataclass(frozen=True)
class RosterQuery:
    search_text: str = ""
    role_filter: str = ALL
    team_filter: str = ALL
    status_filter: str = ALL
    sort_field: str = "activity"
    sort_order: str = "desc"

    def __post_init__(self) -> None:
        if self.sort_field not in SORT_KEYS:
            raise ValueError(
                f"Unknown sort field {self.sort_field!r}; expected one of {sorted(SORT_KEYS)}"
            )
        if self.sort_order not in SORT_ORDERS:
            raise ValueError(f"Unknown sort order {self.sort_order!r}; expected 'asc' or 'desc'")
        if self.status_filter not in STATUS_FILTERS:
            raise ValueError(f"Unknown status filter {self.status_filter!r}")


def _matches(record: AmbassadorRecord, query: RosterQuery, team_members) -> bool:
    needle = query.search_text.strip().lower()
    if needle and needle not in record.name.lower():
        return False

    if query.role_filter != ALL and record.role.value != query.role_filter:
        return False

    if team_members is not None and record.id not in team_members:
        return False

    if query.status_filter == "active" and not record.active:
        return False
    if query.status_filter == "inactive" and record.active:
        return False

    return True


def view(
    records: Sequence[AmbassadorRecord],
    query: RosterQuery,
    teams: Sequence[TeamRecord] = (),
) -> List[AmbassadorRecord]:
    """
    Conjunctive filter, then a stable sort.

    Team filter matches on the selected team's member list; an unknown
    team id matches nobody.
    """
    team_members = None
    if query.team_filter != ALL:
        team = next((t for t in teams if t.id == query.team_filter), None)
        team_members = frozenset(team.members) if team else frozenset()

    filtered = [r for r in records if _matches(r, query, team_members)]

    # sorted() is stable, and stays stable with reverse=True
    return sorted(
        filtered,
        key=SORT_KEYS[query.sort_field],
        reverse=query.sort_order == "desc",
    )

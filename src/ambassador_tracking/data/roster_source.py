# src/ambassador_tracking/data/roster_source.py
"""
Exported snapshots of the analytics and roster services, read from disk.

Each file holds the JSON array the corresponding service returns:
- compliance: per-ambassador {id, name, actual, expected, lastActivity}
- users:      {id, name, role, active, photoUrl, link}
- teams:      {id, name, leader: {id}, members: [{id}]}
- warnings:   {id, count, escalated, pausedUntil}
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, List

from ambassador_tracking.compliance.compliance_models import (
    TeamRecord,
    UserProfile,
    WarningState,
)
from ambassador_tracking.compliance.normalizer import normalize_team, normalize_user
from ambassador_tracking.utils.logger import get_logger

logger = get_logger(__name__)


def _read_array(path: str | Path) -> List[Any]:
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError):
        logger.error("Failed to load %s", path, exc_info=True)
        raise

    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array, got {type(data).__name__}")

    logger.info("Loaded %d rows from %s", len(data), path)
    return data


def load_compliance_rows(path: str | Path) -> List[dict]:
    return _read_array(path)


def load_users(path: str | Path) -> List[UserProfile]:
    return [normalize_user(raw) for raw in _read_array(path)]


def load_teams(path: str | Path) -> List[TeamRecord]:
    return [normalize_team(raw) for raw in _read_array(path)]


def _paused_until(value: Any, path: Path, row: int) -> date | None:
    if not value:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{path}[{row}]: pausedUntil must be an ISO date string, got {value!r}")
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise ValueError(f"{path}[{row}]: pausedUntil is not an ISO date: {value!r}") from None


def load_warnings(path: str | Path) -> List[WarningState]:
    """Warning states keyed by `id` (or legacy `ambassadorId`); rows without either are rejected."""
    path = Path(path)
    states: List[WarningState] = []
    for i, raw in enumerate(_read_array(path)):
        if not isinstance(raw, dict):
            raise ValueError(f"{path}[{i}]: expected an object, got {type(raw).__name__}")
        ambassador_id = raw.get("id") or raw.get("ambassadorId")
        if ambassador_id is None:
            raise ValueError(f"{path}[{i}]: warning row has no id or ambassadorId")
        states.append(
            WarningState(
                ambassador_id=str(ambassador_id),
                count=max(int(raw.get("count") or 0), 0),
                paused_until=_paused_until(raw.get("pausedUntil"), path, i),
                escalated=bool(raw.get("escalated")),
            )
        )
    return states

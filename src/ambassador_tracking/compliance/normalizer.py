# src/ambassador_tracking/compliance/normalizer.py
"""
Boundary adapters for upstream records.

Every loosely-typed shape coming from the analytics and roster services
is translated here, once, into the canonical frozen models.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from ambassador_tracking.compliance.compliance_models import (
    ActivityCounts,
    AmbassadorRecord,
    Role,
    TeamRecord,
    UserProfile,
    WarningState,
)
from ambassador_tracking.compliance.evaluator import evaluate
from ambassador_tracking.utils.logger import get_logger

logger = get_logger(__name__)

# plural (current) spelling -> legacy singular spelling
_FIELD_SPELLINGS = {
    "stories": "story",
    "posts": "post",
    "reels": "reel",
}

_PHOTO_KEYS = ("photoUrl", "photo_url", "profileImage")


def _count(value: Any) -> int:
    """
    Null-safe, non-negative int cast for activity counts.

    Fractional numbers are truncated toward zero and logged.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, float) and not value.is_integer():
        logger.warning("Fractional activity count %r truncated", value)
    try:
        n = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(n, 0)


def normalize(raw: Any) -> ActivityCounts:
    """
    Canonical ActivityCounts from an `actual` or `expected` sub-object.

    Plural keys win over singular ones; a field absent under both
    spellings is 0. Absence of data is the default, not an error.
    """
    if not isinstance(raw, Mapping):
        return ActivityCounts()

    values: Dict[str, int] = {}
    for plural, singular in _FIELD_SPELLINGS.items():
        value = raw.get(plural)
        if value is None:
            value = raw.get(singular)
        values[plural] = _count(value)

    return ActivityCounts(**values)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 string / datetime / date -> aware UTC datetime (None if absent)."""
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, date):
        ts = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            ts = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Unparseable lastActivity %r treated as missing", value)
            return None
    else:
        logger.warning("Unsupported lastActivity type %s treated as missing", type(value).__name__)
        return None

    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def parse_role(value: Any) -> Role:
    if value is None or value == "":
        return Role.AMBASSADOR
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown role: {value!r}") from None


def _id_of(value: Any) -> Optional[str]:
    """Accepts a bare id or an embedded object carrying `id`."""
    if isinstance(value, Mapping):
        value = value.get("id")
    if value is None or value == "":
        return None
    return str(value)


def normalize_team(raw: Mapping) -> TeamRecord:
    """
    Team definition from the roster source.

    Accepts `leader: {id}` or flat `leaderId`, and members as objects
    or bare ids. Member order is preserved; repeats are dropped.
    """
    leader_id = _id_of(raw.get("leader")) or _id_of(raw.get("leaderId"))

    members: List[str] = []
    for m in raw.get("members") or []:
        member_id = _id_of(m)
        if member_id is not None and member_id not in members:
            members.append(member_id)

    return TeamRecord(
        id=str(raw["id"]),
        name=str(raw.get("name") or ""),
        leader_id=leader_id,
        members=tuple(members),
    )


def normalize_user(raw: Mapping) -> UserProfile:
    photo_url = next((raw[k] for k in _PHOTO_KEYS if raw.get(k)), None)
    active = raw.get("active")

    return UserProfile(
        id=str(raw["id"]),
        name=str(raw.get("name") or ""),
        role=parse_role(raw.get("role")),
        active=True if active is None else bool(active),
        photo_url=photo_url,
        link=raw.get("link") or None,
    )


def build_records(
    compliance_rows: Iterable[Mapping],
    users: Iterable[UserProfile],
    warnings: Optional[Iterable[WarningState]] = None,
) -> List[AmbassadorRecord]:
    """
    Join activity rows with roster profiles and warning state.

    Output follows the order of `compliance_rows`. Verdicts are always
    recomputed from the normalized counts; any verdict the upstream
    service sent along is ignored.
    """
    profiles = {u.id: u for u in users}
    warning_by_id = {w.ambassador_id: w for w in (warnings or [])}

    records: List[AmbassadorRecord] = []
    for row in compliance_rows:
        ambassador_id = str(row["id"])
        actual = normalize(row.get("actual"))
        expected = normalize(row.get("expected"))

        profile = profiles.get(ambassador_id)
        if profile is None:
            active = row.get("active")
            profile = UserProfile(
                id=ambassador_id,
                name=str(row.get("name") or ""),
                role=parse_role(row.get("role")),
                active=True if active is None else bool(active),
                photo_url=next((row[k] for k in _PHOTO_KEYS if row.get(k)), None),
                link=row.get("link") or None,
            )

        warning = warning_by_id.get(ambassador_id)

        records.append(
            AmbassadorRecord(
                id=ambassador_id,
                name=profile.name or str(row.get("name") or ""),
                role=profile.role,
                active=profile.active,
                actual=actual,
                expected=expected,
                verdicts=evaluate(actual, expected),
                photo_url=profile.photo_url,
                link=profile.link,
                last_activity=parse_timestamp(row.get("lastActivity")),
                warnings_count=warning.count if warning else 0,
                warning_escalated=warning.escalated if warning else False,
            )
        )

    logger.debug("Built %d ambassador records", len(records))
    return records

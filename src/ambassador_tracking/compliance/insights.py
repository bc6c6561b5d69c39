"""
Dashboard analytics over a roster snapshot.

Same exclusions as the rollups: admins and inactive ambassadors are
left out of activity and compliance figures.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from ambassador_tracking.compliance.compliance_models import (
    CATEGORIES,
    ActivityShare,
    AmbassadorRecord,
    DashboardStats,
    InactiveAmbassador,
    Performer,
    Role,
    TeamContribution,
    TeamRecord,
    WarningState,
)
from ambassador_tracking.compliance.evaluator import compliance_score
from ambassador_tracking.compliance.roster_aggregator import (
    aggregate,
    build_frame,
    is_tracked,
    team_for,
)
from ambassador_tracking.compliance.warning_tracker import active_warnings
from ambassador_tracking.utils.config import settings


def _pct(part: int, whole: int) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def activity_distribution(records: Sequence[AmbassadorRecord]) -> List[ActivityShare]:
    """Share of stories / posts / reels in the total tracked activity."""
    df = build_frame(records, teams=())
    counts = {c: int(df[c].sum()) if not df.empty else 0 for c in CATEGORIES}
    total = sum(counts.values())

    return [ActivityShare(media_type=c, count=counts[c], percentage=_pct(counts[c], total)) for c in CATEGORIES]


def team_contribution(
    records: Sequence[AmbassadorRecord],
    teams: Sequence[TeamRecord],
) -> List[TeamContribution]:
    """Each team's share of the activity of all assigned ambassadors."""
    df = build_frame(records, teams)
    assigned = df[df["team_id"].notna()]
    totals = assigned.groupby("team_id")["total"].sum().to_dict() if not assigned.empty else {}
    grand_total = int(sum(totals.values()))

    return [
        TeamContribution(
            team_id=t.id,
            team_name=t.name,
            total_activity=int(totals.get(t.id, 0)),
            percentage=_pct(int(totals.get(t.id, 0)), grand_total),
        )
        for t in teams
    ]


def _team_name(ambassador_id: str, teams: Sequence[TeamRecord]) -> Optional[str]:
    team = team_for(ambassador_id, teams)
    return team.name if team else None


def top_performers(
    records: Sequence[AmbassadorRecord],
    teams: Sequence[TeamRecord],
    limit: Optional[int] = None,
) -> List[Performer]:
    """
    Highest total activity first, compliance score breaks ties.

    `limit` defaults to settings.top_performers_limit.
    """
    if limit is None:
        limit = settings.top_performers_limit

    rows = [
        Performer(
            ambassador_id=r.id,
            name=r.name,
            team_name=_team_name(r.id, teams),
            total_activity=r.actual.total,
            compliance_score=compliance_score(r.verdicts),
        )
        for r in records
        if is_tracked(r)
    ]

    ranked = sorted(
        rows,
        key=lambda p: (
            p.total_activity,
            p.compliance_score if p.compliance_score is not None else -1.0,
        ),
        reverse=True,
    )
    return ranked[:limit]


def inactive_ambassadors(
    records: Sequence[AmbassadorRecord],
    teams: Sequence[TeamRecord],
    as_of: date,
    days: Optional[int] = None,
) -> List[InactiveAmbassador]:
    """
    Tracked ambassadors with no activity in the `days` before `as_of`
    (settings.inactive_days when omitted).

    Never-active ambassadors come first, then the longest silent.
    """
    if days is None:
        days = settings.inactive_days
    cutoff = as_of - timedelta(days=days)
    rows: List[InactiveAmbassador] = []

    for r in records:
        if not is_tracked(r):
            continue

        last_day = r.last_activity.date() if r.last_activity else None
        if last_day is not None and last_day >= cutoff:
            continue

        rows.append(
            InactiveAmbassador(
                ambassador_id=r.id,
                name=r.name,
                team_name=_team_name(r.id, teams),
                last_activity=r.last_activity,
                days_since_last_activity=(as_of - last_day).days if last_day else None,
                warning_count=r.warnings_count,
            )
        )

    return sorted(
        rows,
        key=lambda a: (
            a.days_since_last_activity is not None,
            -(a.days_since_last_activity or 0),
        ),
    )


def dashboard_stats(
    records: Sequence[AmbassadorRecord],
    teams: Sequence[TeamRecord],
    warnings: Optional[Iterable[WarningState]] = None,
    prior_total: Optional[int] = None,
) -> DashboardStats:
    non_admin = [r for r in records if r.role is not Role.ADMIN]
    overall = aggregate(records, teams, prior_total=prior_total).overall

    if warnings is None:
        warning_total = sum(1 for r in non_admin if r.warnings_count > 0)
    else:
        warning_total = active_warnings(warnings)

    return DashboardStats(
        total_ambassadors=len(non_admin),
        active_ambassadors=sum(1 for r in non_admin if r.active),
        total_teams=len(teams),
        overall_compliance_rate=round(overall.compliance_rate * 100, 1),
        this_week_activity=overall.current_total,
        last_week_activity=prior_total,
        active_warnings=warning_total,
    )

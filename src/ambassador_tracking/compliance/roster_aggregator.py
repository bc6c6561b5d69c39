"""
Roster Aggregator

Purpose:
- Roll ambassador verdicts up to team and organization level
- Week-over-week activity trend for the overall summary

Important:
- Admins and inactive ambassadors are excluded from every rollup
- A leader belongs to their own team but is counted once
- Deterministic: output depends only on the inputs
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ambassador_tracking.compliance.compliance_models import (
    ActivityCounts,
    AmbassadorRecord,
    OverallSummary,
    Role,
    RosterSummary,
    TeamRecord,
    TeamSummary,
    Trend,
)
from ambassador_tracking.compliance.evaluator import is_compliant
from ambassador_tracking.utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = ["id", "team_id", "compliant", "stories", "posts", "reels", "total"]


def is_tracked(record: AmbassadorRecord) -> bool:
    """Only active, non-admin records take part in compliance rollups."""
    return record.active and record.role is not Role.ADMIN


def team_for(ambassador_id: str, teams: Sequence[TeamRecord]) -> Optional[TeamRecord]:
    """
    Team an ambassador is displayed under, or None for "Unassigned".

    Membership is checked before leadership, first team in input order wins.
    """
    for team in teams:
        if ambassador_id in team.members:
            return team
    for team in teams:
        if team.leader_id == ambassador_id:
            return team
    return None


def assign_teams(
    records: Sequence[AmbassadorRecord],
    teams: Sequence[TeamRecord],
) -> Dict[str, Optional[str]]:
    """
    ambassador id -> team id (None when unassigned).

    An id claimed by more than one team is kept in the first one only,
    so a misconfigured roster is never double counted.
    """
    assignment: Dict[str, Optional[str]] = {}

    for record in records:
        claims = [t.id for t in teams if record.id in t.members]
        claims += [t.id for t in teams if t.leader_id == record.id and t.id not in claims]

        if len(claims) > 1:
            logger.warning(
                "Ambassador %s claimed by teams %s; counting under %s only",
                record.id, claims, claims[0],
            )

        assignment[record.id] = claims[0] if claims else None

    return assignment


def _trend(delta: int) -> Trend:
    sign = int(np.sign(delta))
    if sign > 0:
        return Trend.UP
    if sign < 0:
        return Trend.DOWN
    return Trend.NEUTRAL


def build_frame(
    records: Sequence[AmbassadorRecord],
    teams: Sequence[TeamRecord],
) -> pd.DataFrame:
    """One row per tracked ambassador with team id, compliance and activity."""
    tracked = [r for r in records if is_tracked(r)]
    assignment = assign_teams(tracked, teams)

    rows = [
        {
            "id": r.id,
            "team_id": assignment[r.id],
            "compliant": is_compliant(r.verdicts),
            "stories": r.actual.stories,
            "posts": r.actual.posts,
            "reels": r.actual.reels,
            "total": r.actual.total,
        }
        for r in tracked
    ]
    return pd.DataFrame(rows, columns=_COLUMNS)


def aggregate(
    records: Sequence[AmbassadorRecord],
    teams: Sequence[TeamRecord],
    prior_total: Optional[int] = None,
) -> RosterSummary:
    """
    Team and overall rollups for one roster snapshot.

    `prior_total` is the previous period's total activity; without it
    the delta is 0 and the trend neutral.
    """
    df = build_frame(records, teams)

    # ------------------------------------------------------------
    # Per team
    # ------------------------------------------------------------
    assigned = df[df["team_id"].notna()]
    per_team: Dict[str, dict] = {}
    if not assigned.empty:
        per_team = (
            assigned.groupby("team_id", sort=False)
            .agg(
                member_count=("id", "count"),
                compliant_count=("compliant", "sum"),
                stories=("stories", "sum"),
                posts=("posts", "sum"),
                reels=("reels", "sum"),
                total=("total", "sum"),
            )
            .to_dict("index")
        )

    by_team: List[TeamSummary] = []
    for team in teams:
        vals = per_team.get(team.id)
        member_count = int(vals["member_count"]) if vals else 0
        compliant_count = int(vals["compliant_count"]) if vals else 0
        total = int(vals["total"]) if vals else 0

        by_team.append(
            TeamSummary(
                team_id=team.id,
                team_name=team.name,
                member_count=member_count,
                compliant_count=compliant_count,
                compliance_rate=compliant_count / member_count if member_count else 0.0,
                totals=ActivityCounts(
                    stories=int(vals["stories"]) if vals else 0,
                    posts=int(vals["posts"]) if vals else 0,
                    reels=int(vals["reels"]) if vals else 0,
                ),
                total_activity=total,
                avg_activity_per_member=total / member_count if member_count else 0.0,
            )
        )

    # ------------------------------------------------------------
    # Overall
    # ------------------------------------------------------------
    total_ambassadors = len(df)
    compliant_count = int(df["compliant"].sum()) if total_ambassadors else 0
    current_total = int(df["total"].sum()) if total_ambassadors else 0
    delta = current_total - prior_total if prior_total is not None else 0

    overall = OverallSummary(
        total_ambassadors=total_ambassadors,
        compliant_count=compliant_count,
        compliance_rate=compliant_count / total_ambassadors if total_ambassadors else 0.0,
        totals=ActivityCounts(
            stories=int(df["stories"].sum()) if total_ambassadors else 0,
            posts=int(df["posts"].sum()) if total_ambassadors else 0,
            reels=int(df["reels"].sum()) if total_ambassadors else 0,
        ),
        total_teams=len(teams),
        unassigned_count=int(df["team_id"].isna().sum()) if total_ambassadors else 0,
        current_total=current_total,
        prior_total=prior_total,
        activity_delta=delta,
        trend=_trend(delta),
    )

    logger.info(
        "Aggregated roster | tracked=%d compliant=%d teams=%d trend=%s",
        total_ambassadors, compliant_count, len(teams), overall.trend.value,
    )

    return RosterSummary(by_team=by_team, overall=overall)

from __future__ import annotations

import io
from typing import List, Sequence

from ambassador_tracking.compliance.compliance_models import (
    AmbassadorRecord,
    InactiveAmbassador,
    RosterSummary,
    TeamRecord,
    Verdict,
)
from ambassador_tracking.compliance.roster_aggregator import team_for

_VERDICT_LABEL = {
    Verdict.MET: "MET",
    Verdict.UNMET: "UNMET",
    Verdict.EXEMPT: "EXEMPT",
}

_TREND_ARROW = {"up": "▲", "down": "▼", "neutral": "="}

_TEAM_HEADERS = ["team", "members", "compliance", "stories", "posts", "reels", "avg_activity"]
_ROSTER_HEADERS = [
    "name", "role", "team", "stories", "posts", "reels", "story/post/reel", "last_upload", "warnings",
]


def _format_table(
    title: str,
    headers: List[str],
    rows: Sequence[Sequence[object]],
    max_rows: int | None = None,
) -> str:
    """
    Section title plus a fixed-width table.

    Numeric cells are right-aligned, everything else left-aligned.
    Rows past `max_rows` are summarized in a trailing line.
    """
    out = io.StringIO()
    rows = list(rows)
    shown = rows if max_rows is None else rows[:max_rows]

    cells = [[str(v) for v in row] for row in shown]
    numeric = [
        bool(shown) and all(isinstance(row[i], (int, float)) for row in shown)
        for i in range(len(headers))
    ]
    widths = [max([len(h)] + [len(c[i]) for c in cells]) for i, h in enumerate(headers)]

    def line(values):
        return " ".join(
            v.rjust(w) if right else v.ljust(w)
            for v, w, right in zip(values, widths, numeric)
        ).rstrip()

    print(f"== {title} ==\n", file=out)
    print(line(headers), file=out)
    print(" ".join("-" * w for w in widths), file=out)
    for c in cells:
        print(line(c), file=out)

    if len(rows) > len(shown):
        print(f"... ({len(rows) - len(shown)} more rows not shown) ...", file=out)

    return out.getvalue()


def _ratio(actual: int, expected: int) -> str:
    return f"{actual}/{expected}"


def render_roster(
    summary: RosterSummary,
    roster: Sequence[AmbassadorRecord],
    teams: Sequence[TeamRecord],
    inactive: Sequence[InactiveAmbassador] = (),
    max_rows: int | None = 200,
) -> str:
    """Plain-text roster report: overall, teams, filtered roster, inactive list."""
    s = summary.overall
    out = io.StringIO()

    print("=" * 80, file=out)
    print("AMBASSADOR COMPLIANCE SUMMARY", file=out)
    print("=" * 80, file=out)
    print(f"Tracked Ambassadors: {s.total_ambassadors}", file=out)
    print(f"Compliant:           {s.compliant_count} ({s.compliance_rate:.1%})", file=out)
    print(f"Teams:               {s.total_teams} ({s.unassigned_count} unassigned)", file=out)
    print(
        f"Activity:            {s.current_total} "
        f"(stories {s.totals.stories} / posts {s.totals.posts} / reels {s.totals.reels})",
        file=out,
    )
    prior = s.prior_total if s.prior_total is not None else "N/A"
    print(
        f"Week over Week:      {s.activity_delta:+d} vs {prior} {_TREND_ARROW[s.trend.value]}",
        file=out,
    )
    print(file=out)

    team_rows = [
        (
            t.team_name,
            t.member_count,
            f"{t.compliance_rate:.1%}",
            t.totals.stories,
            t.totals.posts,
            t.totals.reels,
            f"{t.avg_activity_per_member:.1f}",
        )
        for t in summary.by_team
    ]
    print(
        _format_table("Teams", _TEAM_HEADERS, team_rows),
        file=out,
    )

    roster_rows = []
    for r in roster:
        team = team_for(r.id, teams)
        roster_rows.append(
            (
                r.name,
                r.role.value,
                team.name if team else "Unassigned",
                _ratio(r.actual.stories, r.expected.stories),
                _ratio(r.actual.posts, r.expected.posts),
                _ratio(r.actual.reels, r.expected.reels),
                "/".join(_VERDICT_LABEL[v] for v in r.verdicts.as_tuple()),
                r.last_activity.strftime("%Y-%m-%d %H:%M") if r.last_activity else "never",
                f"{r.warnings_count}{' !' if r.warning_escalated else ''}",
            )
        )
    print(
        _format_table("Roster", _ROSTER_HEADERS, roster_rows, max_rows=max_rows),
        file=out,
    )

    if inactive:
        print("== Inactive ==\n", file=out)
        for a in inactive:
            since = (
                f"{a.days_since_last_activity} days"
                if a.days_since_last_activity is not None
                else "no activity on record"
            )
            print(f"  • {a.name:<20} {a.team_name or 'Unassigned':<15} {since}", file=out)

    return out.getvalue()

import argparse
from datetime import date, datetime
from typing import List, Optional

from ambassador_tracking.compliance.compliance_models import WarningState
from ambassador_tracking.compliance.insights import inactive_ambassadors
from ambassador_tracking.compliance.normalizer import build_records
from ambassador_tracking.compliance.roster_aggregator import aggregate
from ambassador_tracking.compliance.roster_view import SORT_KEYS, RosterQuery, view
from ambassador_tracking.data.roster_source import (
    load_compliance_rows,
    load_teams,
    load_users,
    load_warnings,
)
from ambassador_tracking.presentation.console import render_roster
from ambassador_tracking.utils.config import settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ambassador compliance roster report"
    )

    parser.add_argument("--compliance", required=True, help="Compliance snapshot (JSON array).")
    parser.add_argument("--users", required=True, help="User roster (JSON array).")
    parser.add_argument("--teams", required=True, help="Team definitions (JSON array).")
    parser.add_argument("--warnings", default=None, help="Warning states (JSON array). Optional.")

    parser.add_argument("--search", default="", help="Case-insensitive name filter.")
    parser.add_argument("--role", choices=["all", "ambassador", "leader", "admin"], default="all")
    parser.add_argument("--team", default="all", help="Team id, or 'all'.")
    parser.add_argument("--status", choices=["all", "active", "inactive"], default="all")
    parser.add_argument("--sort", choices=sorted(SORT_KEYS), default=settings.default_sort_field)
    parser.add_argument("--order", choices=["asc", "desc"], default=settings.default_sort_order)

    parser.add_argument(
        "--prior-total",
        type=int,
        default=None,
        help="Previous period's total activity, for the week-over-week trend.",
    )
    parser.add_argument(
        "--as-of",
        type=str,
        default=None,
        help="Reference date for the inactive list (YYYY-MM-DD). Defaults to today.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    as_of = (
        datetime.strptime(args.as_of, "%Y-%m-%d").date()
        if args.as_of
        else date.today()
    )

    try:
        query = RosterQuery(
            search_text=args.search,
            role_filter=args.role,
            team_filter=args.team,
            status_filter=args.status,
            sort_field=args.sort,
            sort_order=args.order,
        )

        users = load_users(args.users)
        teams = load_teams(args.teams)
        warnings: List[WarningState] = load_warnings(args.warnings) if args.warnings else []
        records = build_records(load_compliance_rows(args.compliance), users, warnings)
    except ValueError as exc:
        parser.error(str(exc))

    summary = aggregate(records, teams, prior_total=args.prior_total)
    roster = view(records, query, teams)
    inactive = inactive_ambassadors(records, teams, as_of=as_of, days=settings.inactive_days)

    print(render_roster(summary, roster, teams, inactive), end="")


if __name__ == "__main__":
    main()

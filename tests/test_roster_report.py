"""
Snapshot loader, console rendering and command line tests.
"""
from __future__ import annotations

import json

import pytest

from conftest import make_record, make_team

from ambassador_tracking.cli.roster_report import main
from ambassador_tracking.compliance.compliance_models import Role, Verdict
from ambassador_tracking.compliance.normalizer import build_records
from ambassador_tracking.compliance.roster_aggregator import aggregate
from ambassador_tracking.data.roster_source import (
    load_compliance_rows,
    load_teams,
    load_users,
    load_warnings,
)
from ambassador_tracking.presentation.console import _format_table, render_roster


def cli_args(fixtures_dir, *extra):
    return [
        "--compliance", str(fixtures_dir / "compliance.json"),
        "--users", str(fixtures_dir / "users.json"),
        "--teams", str(fixtures_dir / "teams.json"),
        "--warnings", str(fixtures_dir / "warnings.json"),
        "--as-of", "2026-10-19",
        *extra,
    ]


class TestRosterSource:
    def test_load_and_build(self, fixtures_dir):
        users = load_users(fixtures_dir / "users.json")
        teams = load_teams(fixtures_dir / "teams.json")
        warnings = load_warnings(fixtures_dir / "warnings.json")
        records = build_records(load_compliance_rows(fixtures_dir / "compliance.json"), users, warnings)

        by_id = {r.id: r for r in records}
        assert by_id["u1"].role is Role.LEADER
        assert by_id["u3"].photo_url == "https://cdn.example.com/u3.jpg"
        assert by_id["u2"].verdicts.reel is Verdict.UNMET
        assert by_id["u2"].warning_escalated is True
        assert by_id["u5"].active is False

        assert teams[0].leader_id == "u1"
        assert teams[0].members == ("u2", "u3")
        assert warnings[1].paused_until.isoformat() == "2026-11-01"

    def test_non_array_rejected(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text(json.dumps({"id": "u1"}))
        with pytest.raises(ValueError, match="expected a JSON array"):
            load_users(path)

    def test_missing_file_propagates(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_teams(tmp_path / "missing.json")

    def test_warning_row_without_id_rejected(self, tmp_path):
        path = tmp_path / "warnings.json"
        path.write_text(json.dumps([{"count": 2}]))
        with pytest.raises(ValueError, match="no id or ambassadorId"):
            load_warnings(path)

    def test_legacy_ambassador_id_accepted(self, tmp_path):
        path = tmp_path / "warnings.json"
        path.write_text(json.dumps([{"ambassadorId": "u9", "count": 1}]))
        [state] = load_warnings(path)
        assert state.ambassador_id == "u9"
        assert state.paused_until is None

    @pytest.mark.parametrize("paused", [20261101, "next week"])
    def test_bad_paused_until_rejected(self, tmp_path, paused):
        path = tmp_path / "warnings.json"
        path.write_text(json.dumps([{"id": "u1", "pausedUntil": paused}]))
        with pytest.raises(ValueError, match="pausedUntil"):
            load_warnings(path)


class TestConsole:
    def test_render_marks_exempt_and_unassigned(self):
        records = [
            make_record("1", "Ana", actual=(2, 0, 0), expected=(2, 0, 1)),
            make_record("2", "Bo", actual=(1, 1, 1), expected=(1, 1, 1)),
        ]
        teams = [make_team("t", members=["2"], name="South")]
        text = render_roster(aggregate(records, teams), records, teams)

        assert "AMBASSADOR COMPLIANCE SUMMARY" in text
        assert "MET/EXEMPT/UNMET" in text
        assert "Unassigned" in text
        assert "South" in text
        assert "never" in text

    def test_table_right_aligns_numbers_and_truncates(self):
        text = _format_table("Teams", ["team", "members"], [("North", 3), ("South", 12), ("East", 1)], max_rows=2)
        lines = text.splitlines()

        assert lines[0] == "== Teams =="
        assert lines[2] == "team  members"
        assert lines[4] == "North       3"
        assert lines[5] == "South      12"
        assert lines[6] == "... (1 more rows not shown) ..."


class TestCli:
    def test_full_report(self, fixtures_dir, capsys):
        main(cli_args(fixtures_dir))
        out = capsys.readouterr().out

        assert "Tracked Ambassadors: 4" in out
        assert "Compliant:           3 (75.0%)" in out
        assert "North" in out
        assert "== Inactive ==" in out
        assert "no activity on record" in out
        assert "18 days" in out

    def test_filter_and_sort(self, fixtures_dir, capsys):
        main(cli_args(fixtures_dir, "--status", "active", "--sort", "name", "--order", "asc"))
        out = capsys.readouterr().out
        roster = out.split("== Roster ==")[1].split("== Inactive ==")[0]

        names = ["Adam Ferri", "Bella Conti", "Dario Neri", "Lena Rossi"]
        positions = [roster.index(n) for n in names]
        assert positions == sorted(positions)
        assert "Xena Galli" not in roster

    def test_prior_total_drives_trend(self, fixtures_dir, capsys):
        main(cli_args(fixtures_dir, "--prior-total", "30"))
        out = capsys.readouterr().out
        assert "Week over Week:      -9 vs 30" in out

    def test_bad_snapshot_is_usage_error(self, fixtures_dir, tmp_path):
        bad = tmp_path / "compliance.json"
        bad.write_text("{not json")
        args = cli_args(fixtures_dir)
        args[1] = str(bad)

        with pytest.raises(SystemExit) as exc:
            main(args)
        assert exc.value.code == 2

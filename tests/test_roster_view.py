"""
Filter/Sort pipeline tests.
"""
from __future__ import annotations

import copy

import pytest

from conftest import make_record, make_team, utc

from ambassador_tracking.compliance.compliance_models import Role
from ambassador_tracking.compliance.roster_view import RosterQuery, view


def ids(records):
    return [r.id for r in records]


class TestFilters:
    def test_default_query_keeps_everyone(self, roster):
        records, teams = roster
        assert sorted(ids(view(records, RosterQuery(), teams))) == sorted(ids(records))

    def test_search_is_case_insensitive_substring(self, roster):
        records, teams = roster
        assert ids(view(records, RosterQuery(search_text="ELL"), teams)) == ["A2"]  # "bella"
        assert ids(view(records, RosterQuery(search_text="  lena "), teams)) == ["L1"]

    def test_role_filter(self, roster):
        records, teams = roster
        result = view(records, RosterQuery(role_filter="leader", sort_field="name", sort_order="asc"), teams)
        assert ids(result) == ["L1", "L2"]

    def test_team_filter_uses_member_list(self, roster):
        records, teams = roster
        result = view(records, RosterQuery(team_filter="alpha", sort_field="name", sort_order="asc"), teams)
        # the leader is not in the member list
        assert ids(result) == ["A1", "A2"]

    def test_unknown_team_matches_nobody(self, roster):
        records, teams = roster
        assert view(records, RosterQuery(team_filter="nope"), teams) == []

    def test_status_filter(self, roster):
        records, teams = roster
        assert ids(view(records, RosterQuery(status_filter="inactive"), teams)) == ["X1"]
        assert "X1" not in ids(view(records, RosterQuery(status_filter="active"), teams))

    def test_filters_are_conjunctive(self, roster):
        records, teams = roster
        query = RosterQuery(search_text="a", role_filter="ambassador", team_filter="alpha")
        assert sorted(ids(view(records, query, teams))) == ["A1", "A2"]

    def test_more_predicates_never_grow_the_result(self, roster):
        records, teams = roster
        queries = [
            RosterQuery(),
            RosterQuery(search_text="a"),
            RosterQuery(search_text="a", role_filter="ambassador"),
            RosterQuery(search_text="a", role_filter="ambassador", team_filter="alpha"),
            RosterQuery(search_text="a", role_filter="ambassador", team_filter="alpha", status_filter="active"),
        ]
        sizes = []
        for q in queries:
            result = view(records, q, teams)
            assert set(ids(result)) <= set(ids(records))
            sizes.append(len(result))
        assert sizes == sorted(sizes, reverse=True)


class TestSorting:
    def test_name_is_case_insensitive(self):
        records = [make_record("1", "charlie"), make_record("2", "Alice"), make_record("3", "bob")]
        assert ids(view(records, RosterQuery(sort_field="name", sort_order="asc"))) == ["2", "3", "1"]

    @pytest.mark.parametrize("field", ["activity", "activities"])
    def test_activity_is_total_actual(self, field):
        records = [
            make_record("1", actual=(1, 1, 1)),
            make_record("2", actual=(5, 0, 0)),
            make_record("3", actual=(0, 0, 1)),
        ]
        assert ids(view(records, RosterQuery(sort_field=field, sort_order="desc"))) == ["2", "1", "3"]

    def test_compliance_counts_met_categories(self):
        records = [
            make_record("exempt", actual=(9, 9, 9), expected=(0, 0, 0)),
            make_record("two", actual=(1, 1, 0), expected=(1, 1, 1)),
            make_record("three", actual=(1, 1, 1), expected=(1, 1, 1)),
        ]
        assert ids(view(records, RosterQuery(sort_field="compliance", sort_order="desc"))) == [
            "three", "two", "exempt",
        ]

    def test_last_upload_missing_sorts_oldest(self):
        records = [
            make_record("none"),
            make_record("new", last_activity=utc(2026, 10, 18)),
            make_record("old", last_activity=utc(2025, 1, 1)),
        ]
        assert ids(view(records, RosterQuery(sort_field="lastUpload", sort_order="asc"))) == ["none", "old", "new"]
        assert ids(view(records, RosterQuery(sort_field="lastUpload", sort_order="desc"))) == ["new", "old", "none"]

    @pytest.mark.parametrize("order", ["asc", "desc"])
    def test_ties_keep_input_order(self, order):
        records = [
            make_record("a", actual=(1, 0, 0)),
            make_record("b", actual=(2, 0, 0)),
            make_record("c", actual=(0, 1, 0)),
            make_record("d", actual=(0, 0, 1)),
        ]
        result = ids(view(records, RosterQuery(sort_field="activity", sort_order=order)))
        tied = [i for i in result if i != "b"]
        assert tied == ["a", "c", "d"]


class TestPurity:
    def test_input_not_mutated(self, roster):
        records, teams = roster
        before = copy.deepcopy(records)
        view(records, RosterQuery(sort_field="name", sort_order="asc", role_filter="ambassador"), teams)
        assert records == before

    def test_repeated_filtering_of_same_snapshot(self, roster):
        records, teams = roster
        q = RosterQuery(team_filter="beta")
        assert view(records, q, teams) == view(records, q, teams)


class TestQueryValidation:
    def test_unknown_sort_field(self):
        with pytest.raises(ValueError, match="sort field"):
            RosterQuery(sort_field="followers")

    def test_unknown_sort_order(self):
        with pytest.raises(ValueError, match="sort order"):
            RosterQuery(sort_order="up")

    def test_unknown_status(self):
        with pytest.raises(ValueError):
            RosterQuery(status_filter="paused")


def test_admin_role_filter():
    records = [make_record("1", role=Role.ADMIN), make_record("2")]
    assert ids(view(records, RosterQuery(role_filter="admin"))) == ["1"]


def test_team_filter_without_teams_matches_nobody():
    assert view([make_record("1")], RosterQuery(team_filter="t"), teams=[make_team("other", members=["1"])]) == []

"""
Pytest configuration and fixtures for the ambassador compliance engine.

Provides factory helpers matching the frozen model definitions.
"""
from datetime import datetime, timezone
from pathlib import Path

import pytest

from ambassador_tracking.compliance.compliance_models import (
    ActivityCounts,
    AmbassadorRecord,
    Role,
    TeamRecord,
)
from ambassador_tracking.compliance.evaluator import evaluate

FIXTURES = Path(__file__).parent / "fixtures"


# =============================================================================
# Factory Helpers
# =============================================================================

def make_record(
    ambassador_id: str,
    name: str = None,
    actual=(0, 0, 0),
    expected=(1, 1, 1),
    role: Role = Role.AMBASSADOR,
    active: bool = True,
    last_activity: datetime = None,
    warnings_count: int = 0,
    warning_escalated: bool = False,
) -> AmbassadorRecord:
    """Create an AmbassadorRecord with verdicts computed from the counts."""
    actual_counts = ActivityCounts(*actual)
    expected_counts = ActivityCounts(*expected)
    return AmbassadorRecord(
        id=ambassador_id,
        name=name or f"Ambassador {ambassador_id}",
        role=role,
        active=active,
        actual=actual_counts,
        expected=expected_counts,
        verdicts=evaluate(actual_counts, expected_counts),
        last_activity=last_activity,
        warnings_count=warnings_count,
        warning_escalated=warning_escalated,
    )


def make_team(team_id: str, leader_id: str = None, members=(), name: str = None) -> TeamRecord:
    return TeamRecord(
        id=team_id,
        name=name or f"Team {team_id}",
        leader_id=leader_id,
        members=tuple(members),
    )


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def roster():
    """
    Two teams and an unassigned ambassador.

    alpha: leader L1, members A1, A2
    beta:  leader L2, member A3
    A4 is on no team, ADM is an admin, X1 is inactive.
    """
    records = [
        make_record("L1", "Lena", actual=(3, 1, 1), expected=(2, 1, 1), role=Role.LEADER,
                    last_activity=utc(2026, 10, 18, 9)),
        make_record("A1", "Adam", actual=(2, 1, 0), expected=(2, 1, 1),
                    last_activity=utc(2026, 10, 17, 12)),
        make_record("A2", "bella", actual=(5, 2, 2), expected=(2, 1, 1),
                    last_activity=utc(2026, 10, 1, 8)),
        make_record("L2", "Marco", actual=(0, 0, 0), expected=(0, 0, 0), role=Role.LEADER),
        make_record("A3", "Carla", actual=(1, 0, 1), expected=(2, 0, 1),
                    last_activity=utc(2026, 10, 15, 20), warnings_count=2),
        make_record("A4", "Dario", actual=(4, 1, 1), expected=(1, 1, 1),
                    last_activity=utc(2026, 10, 19, 7)),
        make_record("ADM", "Admin", actual=(9, 9, 9), expected=(0, 0, 0), role=Role.ADMIN),
        make_record("X1", "Xena", actual=(7, 7, 7), expected=(1, 1, 1), active=False),
    ]
    teams = [
        make_team("alpha", "L1", ["A1", "A2"], name="Alpha"),
        make_team("beta", "L2", ["A3"], name="Beta"),
    ]
    return records, teams

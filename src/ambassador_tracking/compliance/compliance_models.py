from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple


class Verdict(Enum):
    MET = "met"
    UNMET = "unmet"
    EXEMPT = "exempt"


class Role(Enum):
    AMBASSADOR = "ambassador"
    LEADER = "leader"
    ADMIN = "admin"


class Trend(Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class WarningLevel(Enum):
    CLEAR = "clear"
    WARNED = "warned"
    ESCALATED = "escalated"


# Category order is fixed everywhere: story, post, reel
CATEGORIES: Tuple[str, ...] = ("stories", "posts", "reels")


# ------------------------------------------------------------
# Activity counts / verdicts
# ------------------------------------------------------------
@dataclass(frozen=True)
class ActivityCounts:
    stories: int = 0
    posts: int = 0
    reels: int = 0

    @property
    def total(self) -> int:
        return self.stories + self.posts + self.reels


@dataclass(frozen=True)
class CategoryVerdicts:
    story: Verdict
    post: Verdict
    reel: Verdict

    def as_tuple(self) -> Tuple[Verdict, Verdict, Verdict]:
        return (self.story, self.post, self.reel)


# ------------------------------------------------------------
# Roster entities
# ------------------------------------------------------------
@dataclass(frozen=True)
class UserProfile:
    id: str
    name: str
    role: Role = Role.AMBASSADOR
    active: bool = True
    photo_url: Optional[str] = None
    link: Optional[str] = None


@dataclass(frozen=True)
class TeamRecord:
    id: str
    name: str
    leader_id: Optional[str]
    members: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WarningState:
    ambassador_id: str
    count: int = 0
    paused_until: Optional[date] = None
    escalated: bool = False


@dataclass(frozen=True)
class AmbassadorRecord:
    id: str
    name: str
    role: Role
    active: bool
    actual: ActivityCounts
    expected: ActivityCounts
    verdicts: CategoryVerdicts
    photo_url: Optional[str] = None
    link: Optional[str] = None
    last_activity: Optional[datetime] = None
    warnings_count: int = 0
    warning_escalated: bool = False


# ------------------------------------------------------------
# Rollups
# ------------------------------------------------------------
@dataclass(frozen=True)
class TeamSummary:
    team_id: str
    team_name: str
    member_count: int
    compliant_count: int
    compliance_rate: float
    totals: ActivityCounts
    total_activity: int
    avg_activity_per_member: float


@dataclass(frozen=True)
class OverallSummary:
    total_ambassadors: int
    compliant_count: int
    compliance_rate: float
    totals: ActivityCounts
    total_teams: int
    unassigned_count: int

    # Week-over-week trend
    current_total: int
    prior_total: Optional[int]
    activity_delta: int
    trend: Trend


@dataclass(frozen=True)
class RosterSummary:
    by_team: List[TeamSummary]
    overall: OverallSummary


# ------------------------------------------------------------
# Dashboard analytics
# ------------------------------------------------------------
@dataclass(frozen=True)
class ActivityShare:
    media_type: str
    count: int
    percentage: float


@dataclass(frozen=True)
class TeamContribution:
    team_id: str
    team_name: str
    total_activity: int
    percentage: float


@dataclass(frozen=True)
class Performer:
    ambassador_id: str
    name: str
    team_name: Optional[str]
    total_activity: int
    compliance_score: Optional[float]


@dataclass(frozen=True)
class InactiveAmbassador:
    ambassador_id: str
    name: str
    team_name: Optional[str]
    last_activity: Optional[datetime]
    days_since_last_activity: Optional[int]
    warning_count: int


@dataclass(frozen=True)
class DashboardStats:
    total_ambassadors: int
    active_ambassadors: int
    total_teams: int
    overall_compliance_rate: float    # percent, 1 decimal
    this_week_activity: int
    last_week_activity: Optional[int]
    active_warnings: int

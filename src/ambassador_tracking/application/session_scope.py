from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ambassador_tracking.compliance.compliance_models import (
    AmbassadorRecord,
    Role,
    TeamRecord,
)


@dataclass(frozen=True)
class SessionContext:
    """Who is looking at the roster. Passed in explicitly, never read from globals."""
    user_id: str
    role: Role


def scope_for_session(
    records: Sequence[AmbassadorRecord],
    teams: Sequence[TeamRecord],
    session: SessionContext,
) -> List[AmbassadorRecord]:
    """
    Records visible to the session user.

    - admin: everyone
    - leader: members of the teams they lead, plus themself
    - ambassador: only their own record
    """
    if session.role is Role.ADMIN:
        return list(records)

    if session.role is Role.LEADER:
        visible = {session.user_id}
        for team in teams:
            if team.leader_id == session.user_id:
                visible.update(team.members)
        return [r for r in records if r.id in visible]

    return [r for r in records if r.id == session.user_id]

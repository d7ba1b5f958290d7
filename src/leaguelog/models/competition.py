"""Competition documents and the derived views computed from them."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from .base import DocumentModel, Identifier
from .match import Match, MatchEvent
from .team import StandingsRow, Team


UnresolvedReason = Literal["missing_team", "unknown_team", "missing_player", "unknown_player"]


class ScorerRecord(DocumentModel):
    """Flattened golden-boot line."""

    player_id: Identifier
    name: str
    team_name: str
    crest_url: str = ""
    goals: int = 0
    potm_wins: int = 0


class UnresolvedEvent(DocumentModel):
    """Stat-bearing event that could not be credited to a squad player."""

    match_id: Identifier
    event: MatchEvent
    reason: UnresolvedReason


class DerivedState(DocumentModel):
    standings: List[StandingsRow] = Field(default_factory=list)
    roster: List[Team] = Field(default_factory=list)
    unresolved_events: List[UnresolvedEvent] = Field(default_factory=list)


class Competition(DocumentModel):
    id: Identifier
    name: str
    teams: List[Team] = Field(default_factory=list)
    fixtures: List[Match] = Field(default_factory=list)
    results: List[Match] = Field(default_factory=list)
    derived: Optional[DerivedState] = None

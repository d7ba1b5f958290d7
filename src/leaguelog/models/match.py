"""Match log models: fixtures and results share one shape."""

from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional, Union

from pydantic import Field

from .base import DocumentModel, Identifier


MatchStatus = Literal[
    "scheduled",
    "live",
    "finished",
    "postponed",
    "cancelled",
    "abandoned",
    "suspended",
]

Score = Union[int, str]


class MatchEvent(DocumentModel):
    minute: Optional[int] = None
    type: str
    description: str = ""
    team_name: Optional[str] = None
    player_name: Optional[str] = None
    player_id: Optional[Identifier] = Field(default=None, alias="playerID")


class MatchLineup(DocumentModel):
    starters: List[Identifier] = Field(default_factory=list)
    subs: List[Identifier] = Field(default_factory=list)


class MatchLineups(DocumentModel):
    team_a: Optional[MatchLineup] = None
    team_b: Optional[MatchLineup] = None


class PlayerOfTheMatch(DocumentModel):
    name: str = ""
    team_name: Optional[str] = None
    player_id: Optional[Identifier] = Field(default=None, alias="playerID")


class Match(DocumentModel):
    """Fixture or result; ``team_a`` is the home side."""

    id: Identifier
    team_a: str
    team_b: str
    score_a: Optional[Score] = None
    score_b: Optional[Score] = None
    status: MatchStatus = "scheduled"
    match_date: Optional[date] = Field(default=None, alias="fullDate")
    time: Optional[str] = None
    venue: Optional[str] = None
    matchday: Optional[int] = None
    referee: Optional[str] = None
    events: List[MatchEvent] = Field(default_factory=list)
    lineups: Optional[MatchLineups] = None
    player_of_the_match: Optional[PlayerOfTheMatch] = None

    @property
    def title(self) -> str:
        return f"{self.team_a} vs {self.team_b}"

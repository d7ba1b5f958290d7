"""Canonical team and player models shared by every computation."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from .base import DocumentModel, Identifier


Position = Literal["Goalkeeper", "Defender", "Midfielder", "Forward"]


class PlayerStats(DocumentModel):
    appearances: int = Field(default=0, ge=0)
    goals: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    yellow_cards: int = Field(default=0, ge=0)
    red_cards: int = Field(default=0, ge=0)
    clean_sheets: int = Field(default=0, ge=0)
    potm_wins: int = Field(default=0, ge=0)


class Transfer(DocumentModel):
    year: int
    from_club: str = Field(alias="from")
    to_club: str = Field(alias="to")


class Player(DocumentModel):
    """Squad member; ``stats`` holds the stored (baseline) totals."""

    id: Identifier = Field(..., min_length=1)
    name: str
    number: Optional[int] = None
    position: Optional[Position] = None
    club: Optional[str] = None
    photo_url: Optional[str] = None
    nationality: Optional[str] = None
    age: Optional[int] = None
    height: Optional[str] = None
    stats: PlayerStats = Field(default_factory=PlayerStats)
    transfer_history: List[Transfer] = Field(default_factory=list)


class StandingsRow(DocumentModel):
    """One team's computed league-table line."""

    team_id: Optional[Identifier] = None
    team_name: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0
    form: str = ""


class Team(DocumentModel):
    id: Optional[Identifier] = None
    name: str
    crest_url: str = ""
    players: List[Player] = Field(default_factory=list)
    standing: Optional[StandingsRow] = None

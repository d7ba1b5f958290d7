"""Data model shared by the reconciliation and statistics layers."""

from .base import DocumentModel, Identifier
from .competition import Competition, DerivedState, ScorerRecord, UnresolvedEvent, UnresolvedReason
from .match import (
    Match,
    MatchEvent,
    MatchLineup,
    MatchLineups,
    MatchStatus,
    PlayerOfTheMatch,
    Score,
)
from .team import Player, PlayerStats, Position, StandingsRow, Team, Transfer

__all__ = [
    "Competition",
    "DerivedState",
    "DocumentModel",
    "Identifier",
    "Match",
    "MatchEvent",
    "MatchLineup",
    "MatchLineups",
    "MatchStatus",
    "Player",
    "PlayerOfTheMatch",
    "PlayerStats",
    "Position",
    "ScorerRecord",
    "Score",
    "StandingsRow",
    "Team",
    "Transfer",
    "UnresolvedEvent",
    "UnresolvedReason",
]

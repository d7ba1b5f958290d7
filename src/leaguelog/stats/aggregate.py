"""Per-player totals from match events, lineups and stored baselines."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Literal, Optional, Sequence, Tuple

from leaguelog.models import (
    Match,
    MatchEvent,
    MatchLineup,
    Player,
    PlayerStats,
    ScorerRecord,
    Team,
    UnresolvedEvent,
    UnresolvedReason,
)
from leaguelog.resolver import MatchStrategy, resolve
from leaguelog.standings import parse_score


logger = logging.getLogger(__name__)

StatsMode = Literal["competition", "global"]

_EVENT_COUNTERS = {
    "goal": "goals",
    "assist": "assists",
    "yellow-card": "yellow_cards",
    "red-card": "red_cards",
}
_CLEAN_SHEET_POSITIONS = {"Goalkeeper", "Defender"}
_STAT_FIELDS = tuple(PlayerStats.model_fields)

POTM_EVENT_TYPE = "player-of-the-match"


def event_kind(event_type: str) -> str:
    """Canonical event type: ``"Yellow_Card"`` becomes ``"yellow-card"``."""

    return "-".join(event_type.strip().lower().replace("_", " ").split())


@dataclass(frozen=True)
class PlayerAggregation:
    teams: List[Team]
    unresolved: List[UnresolvedEvent]


class _Ledger:
    """Working counters keyed by (team index, player index)."""

    def __init__(self, roster: Sequence[Team], mode: StatsMode):
        self.roster = roster
        self.indexed_teams = list(enumerate(roster))
        self.counters: dict[Tuple[int, int], Counter] = {}
        for team_index, team in self.indexed_teams:
            for player_index, player in enumerate(team.players):
                start = Counter()
                if mode == "global":
                    start.update({name: getattr(player.stats, name) for name in _STAT_FIELDS})
                self.counters[(team_index, player_index)] = start

    def team(self, name: Optional[str], strategy: Optional[MatchStrategy]) -> Optional[int]:
        found = resolve(name, self.indexed_teams, key=lambda item: item[1].name, strategy=strategy)
        return None if found is None else found[0]

    def player(
        self,
        team_index: int,
        player_id: Optional[str],
        player_name: Optional[str],
        strategy: Optional[MatchStrategy],
    ) -> Optional[int]:
        players = list(enumerate(self.roster[team_index].players))
        if player_id:
            for player_index, player in players:
                if player.id == player_id:
                    return player_index
        found = resolve(player_name, players, key=lambda item: item[1].name, strategy=strategy)
        return None if found is None else found[0]

    def credit(
        self,
        team_name: Optional[str],
        player_id: Optional[str],
        player_name: Optional[str],
        counter: str,
        strategy: Optional[MatchStrategy],
    ) -> Optional[UnresolvedReason]:
        if not team_name:
            return "missing_team"
        team_index = self.team(team_name, strategy)
        if team_index is None:
            return "unknown_team"
        if not player_id and not player_name:
            return "missing_player"
        player_index = self.player(team_index, player_id, player_name, strategy)
        if player_index is None:
            return "unknown_player"
        self.counters[(team_index, player_index)][counter] += 1
        return None

    def lineup(self, team_index: int, lineup: MatchLineup, clean_sheet: bool) -> None:
        players = self.roster[team_index].players
        involved = set(lineup.starters) | set(lineup.subs)
        for player_index, player in enumerate(players):
            if player.id not in involved:
                continue
            tally = self.counters[(team_index, player_index)]
            tally["appearances"] += 1
            if clean_sheet and player.position in _CLEAN_SHEET_POSITIONS:
                tally["clean_sheets"] += 1

    def teams(self) -> List[Team]:
        updated: List[Team] = []
        for team_index, team in self.indexed_teams:
            players: List[Player] = []
            for player_index, player in enumerate(team.players):
                tally = self.counters[(team_index, player_index)]
                stats = PlayerStats(**{name: tally[name] for name in _STAT_FIELDS})
                players.append(player.model_copy(update={"stats": stats}))
            updated.append(team.model_copy(update={"players": players}))
        return updated


def _credit_lineups(ledger: _Ledger, match: Match, strategy: Optional[MatchStrategy]) -> None:
    if match.lineups is None:
        return
    finished = match.status == "finished"
    sides = (
        (match.team_a, match.lineups.team_a, parse_score(match.score_b).goals),
        (match.team_b, match.lineups.team_b, parse_score(match.score_a).goals),
    )
    for team_name, lineup, conceded in sides:
        if lineup is None:
            continue
        team_index = ledger.team(team_name, strategy)
        if team_index is None:
            logger.debug("Lineup for %r in match %s has no roster team", team_name, match.id)
            continue
        ledger.lineup(team_index, lineup, clean_sheet=finished and conceded == 0)


def reconcile_players(
    matches: Iterable[Match],
    roster: Iterable[Team],
    mode: StatsMode = "competition",
    *,
    strategy: Optional[MatchStrategy] = None,
) -> PlayerAggregation:
    """Recompute every rostered player's totals from the supplied matches.

    ``competition`` mode counts only the supplied log. ``global`` mode adds
    the log on top of each player's stored baseline, which is carried
    forward untouched. Goal, assist and card events that cannot be tied to
    a squad player are returned in ``unresolved`` for review.
    """

    if mode not in ("competition", "global"):
        raise ValueError(f"mode must be 'competition' or 'global', got {mode!r}")
    ledger = _Ledger(list(roster), mode)
    unresolved: List[UnresolvedEvent] = []

    for match in matches:
        for event in match.events:
            counter = _EVENT_COUNTERS.get(event_kind(event.type))
            if counter is None:
                continue
            reason = ledger.credit(event.team_name, event.player_id, event.player_name, counter, strategy)
            if reason is not None:
                unresolved.append(UnresolvedEvent(match_id=match.id, event=event, reason=reason))

        potm = match.player_of_the_match
        if potm is not None and (potm.name or potm.player_id):
            reason = ledger.credit(potm.team_name, potm.player_id, potm.name, "potm_wins", strategy)
            if reason is not None:
                event = MatchEvent(
                    type=POTM_EVENT_TYPE,
                    description="Player of the match",
                    team_name=potm.team_name,
                    player_name=potm.name or None,
                    player_id=potm.player_id,
                )
                unresolved.append(UnresolvedEvent(match_id=match.id, event=event, reason=reason))

        _credit_lineups(ledger, match, strategy)

    for item in unresolved:
        logger.debug(
            "Unresolved %s in match %s (%s): player=%r team=%r",
            item.event.type,
            item.match_id,
            item.reason,
            item.event.player_name,
            item.event.team_name,
        )
    return PlayerAggregation(teams=ledger.teams(), unresolved=unresolved)


def aggregate_stats(
    matches: Iterable[Match],
    roster: Iterable[Team],
    mode: StatsMode = "competition",
    *,
    strategy: Optional[MatchStrategy] = None,
) -> List[Team]:
    """Return copies of ``roster`` with recomputed player stats."""

    return reconcile_players(matches, roster, mode, strategy=strategy).teams


def top_scorers(teams: Iterable[Team], limit: Optional[int] = None) -> List[ScorerRecord]:
    """Golden-boot view: goals descending, then name ascending."""

    records = [
        ScorerRecord(
            player_id=player.id,
            name=player.name,
            team_name=team.name,
            crest_url=team.crest_url,
            goals=player.stats.goals,
            potm_wins=player.stats.potm_wins,
        )
        for team in teams
        for player in team.players
        if player.stats.goals > 0
    ]
    records.sort(key=lambda record: (-record.goals, record.name.casefold(), record.name))
    if limit is not None:
        return records[: max(0, limit)]
    return records


def golden_boot(
    matches: Iterable[Match],
    roster: Iterable[Team],
    limit: Optional[int] = None,
    *,
    mode: StatsMode = "competition",
    strategy: Optional[MatchStrategy] = None,
) -> List[ScorerRecord]:
    return top_scorers(aggregate_stats(matches, roster, mode, strategy=strategy), limit)

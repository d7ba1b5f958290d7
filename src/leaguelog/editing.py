"""Administrative edits that rewrite the match log by team name."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from leaguelog.config import StandingsRules
from leaguelog.derived import refresh_competition
from leaguelog.models import Competition, Match, Player
from leaguelog.normalize import normalize
from leaguelog.resolver import MatchStrategy


logger = logging.getLogger(__name__)


def rename_team_in_matches(matches: Iterable[Match], old_name: str, new_name: str) -> List[Match]:
    """Return copies of ``matches`` with ``old_name`` replaced everywhere.

    Comparison uses normalized keys, so "Swallows F.C." also renames
    "Swallows". Event team names and the player-of-the-match team follow.
    """

    old_key = normalize(old_name)
    renamed: List[Match] = []
    for match in matches:
        update: dict = {}
        if normalize(match.team_a) == old_key:
            update["team_a"] = new_name
        if normalize(match.team_b) == old_key:
            update["team_b"] = new_name
        if any(event.team_name and normalize(event.team_name) == old_key for event in match.events):
            update["events"] = [
                event.model_copy(update={"team_name": new_name})
                if event.team_name and normalize(event.team_name) == old_key
                else event
                for event in match.events
            ]
        potm = match.player_of_the_match
        if potm is not None and potm.team_name and normalize(potm.team_name) == old_key:
            update["player_of_the_match"] = potm.model_copy(update={"team_name": new_name})
        renamed.append(match.model_copy(update=update) if update else match)
    return renamed


def merge_teams(
    competition: Competition,
    keep_id: str,
    remove_id: str,
    *,
    rules: Optional[StandingsRules] = None,
    strategy: Optional[MatchStrategy] = None,
) -> Competition:
    """Fold one team into another and recompute the derived state.

    Players from the removed team join the kept squad unless a player with
    the same id is already there; every match that named the removed team
    now names the kept one.
    """

    if keep_id == remove_id:
        raise ValueError("Cannot merge a team into itself")
    by_id = {team.id: team for team in competition.teams}
    if keep_id not in by_id or remove_id not in by_id:
        raise KeyError(f"Teams {keep_id!r} and {remove_id!r} must both exist in {competition.id!r}")
    keep = by_id[keep_id]
    remove = by_id[remove_id]

    known = {player.id for player in keep.players}
    players: List[Player] = list(keep.players)
    players.extend(player for player in remove.players if player.id not in known)
    merged_team = keep.model_copy(update={"players": players})

    teams = [merged_team if team.id == keep_id else team for team in competition.teams if team.id != remove_id]
    updated = competition.model_copy(
        update={
            "teams": teams,
            "fixtures": rename_team_in_matches(competition.fixtures, remove.name, keep.name),
            "results": rename_team_in_matches(competition.results, remove.name, keep.name),
        }
    )
    logger.info("Merged %r into %r in %s", remove.name, keep.name, competition.id)
    return refresh_competition(updated, rules=rules, strategy=strategy)

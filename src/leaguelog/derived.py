"""Rebuild the derived part of a competition document from its match log."""

from __future__ import annotations

from typing import Optional

from leaguelog.config import StandingsRules
from leaguelog.models import Competition, DerivedState
from leaguelog.resolver import MatchStrategy
from leaguelog.standings import build_table
from leaguelog.stats import reconcile_players


def derive_state(
    competition: Competition,
    *,
    rules: Optional[StandingsRules] = None,
    strategy: Optional[MatchStrategy] = None,
) -> DerivedState:
    table = build_table(
        competition.teams,
        competition.results,
        competition.fixtures,
        rules=rules,
        strategy=strategy,
    )
    aggregation = reconcile_players(
        [*competition.fixtures, *competition.results],
        competition.teams,
        "competition",
        strategy=strategy,
    )
    return DerivedState(
        standings=table.standings,
        roster=aggregation.teams,
        unresolved_events=aggregation.unresolved,
    )


def refresh_competition(
    competition: Competition,
    *,
    rules: Optional[StandingsRules] = None,
    strategy: Optional[MatchStrategy] = None,
) -> Competition:
    """Return a copy of ``competition`` whose ``derived`` matches its log."""

    derived = derive_state(competition, rules=rules, strategy=strategy)
    return competition.model_copy(update={"derived": derived})

"""League table rules for supported competition formats."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Literal, Mapping, Tuple


logger = logging.getLogger(__name__)

TieBreaker = Literal[
    "points",
    "head_to_head_points",
    "head_to_head_away_goals",
    "goal_difference",
    "goals_for",
    "name",
]
WalkoverPolicy = Literal["skip", "award"]

_RULESET_ENV = "LEAGUELOG_RULESET"
DEFAULT_RULESET = "DEFAULT"


@dataclass(frozen=True)
class StandingsRules:
    key: str
    description: str
    points_win: int
    points_draw: int
    points_loss: int
    tie_breakers: Tuple[TieBreaker, ...]
    counted_statuses: FrozenSet[str]
    walkover_policy: WalkoverPolicy
    form_length: int

    @property
    def uses_head_to_head(self) -> bool:
        return any(step.startswith("head_to_head") for step in self.tie_breakers)


_STANDARD_LADDER: Tuple[TieBreaker, ...] = ("points", "goal_difference", "goals_for", "name")


_RULESETS: Dict[str, StandingsRules] = {
    "DEFAULT": StandingsRules(
        key="DEFAULT",
        description="3/1/0 points; points, goal difference, goals scored, name",
        points_win=3,
        points_draw=1,
        points_loss=0,
        tie_breakers=_STANDARD_LADDER,
        counted_statuses=frozenset({"finished"}),
        walkover_policy="skip",
        form_length=5,
    ),
    "HEAD_TO_HEAD": StandingsRules(
        key="HEAD_TO_HEAD",
        description="Rule 8.2 ladder: head-to-head points and away goals before goal difference",
        points_win=3,
        points_draw=1,
        points_loss=0,
        tie_breakers=(
            "points",
            "head_to_head_points",
            "head_to_head_away_goals",
            "goal_difference",
            "goals_for",
            "name",
        ),
        counted_statuses=frozenset({"finished"}),
        walkover_policy="skip",
        form_length=5,
    ),
    "AWARDED": StandingsRules(
        key="AWARDED",
        description="Default ladder; walkover scores count with their awarded goals",
        points_win=3,
        points_draw=1,
        points_loss=0,
        tie_breakers=_STANDARD_LADDER,
        counted_statuses=frozenset({"finished"}),
        walkover_policy="award",
        form_length=5,
    ),
}


def iter_rules() -> Iterable[StandingsRules]:
    """Return an iterator of all configured rulesets."""

    return _RULESETS.values()


def get_rules(key: str | None = None) -> StandingsRules:
    """Fetch a ruleset by key, raising KeyError if missing. No key means DEFAULT."""

    if key is None:
        return default_rules()
    lookup = key.strip().upper().replace("-", "_")
    if lookup not in _RULESETS:
        raise KeyError(f"No standings rules configured for {key!r}")
    return _RULESETS[lookup]


def default_rules() -> StandingsRules:
    return _RULESETS[DEFAULT_RULESET]


def rules_from_env() -> StandingsRules:
    """Ruleset named by ``LEAGUELOG_RULESET``, for command-line entry points."""

    raw = os.getenv(_RULESET_ENV)
    if not raw:
        return default_rules()
    try:
        return get_rules(raw)
    except KeyError:
        logger.warning("Invalid ruleset for %s: %s; using %s", _RULESET_ENV, raw, DEFAULT_RULESET)
        return default_rules()


# Read-only view for callers that list choices (e.g. the CLI).
RULESETS: Mapping[str, StandingsRules] = dict(_RULESETS)

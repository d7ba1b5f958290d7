"""Player statistics aggregation."""

from .aggregate import (
    PlayerAggregation,
    StatsMode,
    aggregate_stats,
    event_kind,
    golden_boot,
    reconcile_players,
    top_scorers,
)

__all__ = [
    "PlayerAggregation",
    "StatsMode",
    "aggregate_stats",
    "event_kind",
    "golden_boot",
    "reconcile_players",
    "top_scorers",
]

"""Name reconciliation, league tables and player statistics for league data."""

from leaguelog.normalize import normalize
from leaguelog.resolver import resolve, resolve_name
from leaguelog.standings import build_table, compute_standings
from leaguelog.stats import aggregate_stats, top_scorers
from leaguelog.ingest import commit, reconcile

__all__ = [
    "aggregate_stats",
    "build_table",
    "commit",
    "compute_standings",
    "normalize",
    "reconcile",
    "resolve",
    "resolve_name",
    "top_scorers",
]

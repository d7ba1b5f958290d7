"""Merge reviewed matches into a competition as one atomic write."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Protocol

from leaguelog.config import StandingsRules
from leaguelog.derived import refresh_competition
from leaguelog.models import Competition, Match
from leaguelog.resolver import MatchStrategy

from .reconcile import ReviewedMatch, match_key


logger = logging.getLogger(__name__)

_RESULT_STATUSES = {"finished", "abandoned"}


class CommitError(RuntimeError):
    """The import transaction did not complete; nothing was written."""


class ConcurrentModificationError(CommitError):
    """The competition changed between read and write."""


class TransactionTarget(Protocol):
    """Storage primitive supplied by the caller.

    ``run_transaction`` must read the current document, pass it to
    ``apply`` and write the returned document only if the stored copy has
    not changed in the meantime.
    """

    def run_transaction(
        self,
        competition_id: str,
        apply: Callable[[Competition], Competition],
        *,
        expected_version: Optional[int] = None,
    ) -> Competition: ...


def is_result(match: Match) -> bool:
    return match.status in _RESULT_STATUSES


def apply_import(
    competition: Competition,
    reviewed: Iterable[ReviewedMatch],
    *,
    rules: Optional[StandingsRules] = None,
    strategy: Optional[MatchStrategy] = None,
) -> Competition:
    """Return a new competition with the selected items merged in.

    Results replace any fixture or earlier result with the same home, away
    and date. Derived standings and roster are recomputed from the merged log.
    """

    fixtures: List[Match] = list(competition.fixtures)
    results: List[Match] = list(competition.results)
    for item in reviewed:
        if not item.selected:
            continue
        match = item.match
        if is_result(match):
            key = match_key(match.team_a, match.team_b, match.match_date)
            if key is not None:
                fixtures = [
                    fixture
                    for fixture in fixtures
                    if match_key(fixture.team_a, fixture.team_b, fixture.match_date) != key
                ]
                results = [
                    result
                    for result in results
                    if match_key(result.team_a, result.team_b, result.match_date) != key
                ]
            results.append(match)
        else:
            fixtures.append(match)

    merged = competition.model_copy(update={"fixtures": fixtures, "results": results})
    return refresh_competition(merged, rules=rules, strategy=strategy)


def commit(
    selected: Iterable[ReviewedMatch],
    target: TransactionTarget,
    competition_id: str,
    *,
    rules: Optional[StandingsRules] = None,
    strategy: Optional[MatchStrategy] = None,
    expected_version: Optional[int] = None,
) -> Competition:
    """Write the selected items and the recomputed derived state together.

    Items whose ``selected`` flag is off are ignored. On failure a
    :class:`CommitError` is raised and the caller's review list is left as
    it was, ready for a retry.
    """

    items = [item for item in selected if item.selected]
    if not items:
        raise ValueError("No matches selected for import")

    def apply(current: Competition) -> Competition:
        return apply_import(current, items, rules=rules, strategy=strategy)

    try:
        updated = target.run_transaction(competition_id, apply, expected_version=expected_version)
    except CommitError as exc:
        logger.warning("Import into %s rejected: %s", competition_id, exc)
        raise
    except (KeyError, ValueError, OSError) as exc:
        raise CommitError(f"Import into {competition_id} failed: {exc}") from exc

    logger.info("Committed %d matches into %s", len(items), competition_id)
    return updated

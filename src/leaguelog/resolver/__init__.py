"""Resolve free-text names against canonical teams and players.

Every screen that binds a typed or imported name to a record goes through
:func:`resolve`. A ``None`` result means "unmapped": callers surface it for
review instead of guessing.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from .strategies import (
    DEFAULT_STRATEGY,
    ContainmentResolver,
    EditDistanceResolver,
    MatchStrategy,
    display_name,
    levenshtein,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolve(
    raw: Optional[str],
    candidates: Iterable[T],
    *,
    key: Optional[Callable[[T], str]] = None,
    strategy: Optional[MatchStrategy] = None,
) -> Optional[T]:
    """Return the candidate ``raw`` refers to, or ``None`` when unmapped."""

    pool: Sequence[T] = candidates if isinstance(candidates, (list, tuple)) else list(candidates)
    chosen = (strategy or DEFAULT_STRATEGY).match(raw, pool, key or display_name)
    if chosen is None and raw:
        logger.debug("No match for %r among %d candidates", raw, len(pool))
    return chosen


def resolve_name(
    raw: Optional[str],
    names: Iterable[str],
    *,
    strategy: Optional[MatchStrategy] = None,
) -> Optional[str]:
    """Resolve against plain display names, returning the canonical spelling."""

    return resolve(raw, list(names), strategy=strategy)


__all__ = [
    "ContainmentResolver",
    "DEFAULT_STRATEGY",
    "EditDistanceResolver",
    "MatchStrategy",
    "display_name",
    "levenshtein",
    "resolve",
    "resolve_name",
]

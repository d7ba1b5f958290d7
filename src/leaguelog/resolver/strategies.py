"""Name matching strategies behind the entity resolver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, TypeVar

from leaguelog.normalize import normalize


T = TypeVar("T")
NameKey = Callable[[T], str]


def display_name(candidate: object) -> str:
    """Read a candidate's display name from ``.name`` or the value itself."""

    if isinstance(candidate, str):
        return candidate
    name = getattr(candidate, "name", None)
    return name if isinstance(name, str) else ""


def _pick(pool: Sequence[Tuple[str, T]]) -> Optional[T]:
    if not pool:
        return None
    return min(pool, key=lambda item: (len(item[0]), item[0]))[1]


def levenshtein(left: str, right: str) -> int:
    if len(left) < len(right):
        left, right = right, left
    previous = list(range(len(right) + 1))
    for i, left_ch in enumerate(left, start=1):
        current = [i]
        for j, right_ch in enumerate(right, start=1):
            cost = 0 if left_ch == right_ch else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


class MatchStrategy:
    """Base strategy: exact normalized-key match, then a strategy-specific tier."""

    def match(self, raw: Optional[str], candidates: Sequence[T], key: NameKey = display_name) -> Optional[T]:
        target = normalize(raw)
        if not target:
            return None
        keyed = [(key(candidate), normalize(key(candidate)), candidate) for candidate in candidates]
        exact = [(name, candidate) for name, norm, candidate in keyed if norm and norm == target]
        if exact:
            return _pick(exact)
        return self._fallback(target, keyed)

    def _fallback(self, target: str, keyed: Sequence[Tuple[str, str, T]]) -> Optional[T]:
        return None


@dataclass(frozen=True)
class ContainmentResolver(MatchStrategy):
    """Exact match, then substring containment in either direction."""

    min_length: int = 3

    def _fallback(self, target, keyed):
        pool = []
        for name, norm, candidate in keyed:
            if not norm:
                continue
            shorter = norm if len(norm) <= len(target) else target
            if len(shorter) < self.min_length:
                continue
            if target in norm or norm in target:
                pool.append((name, candidate))
        return _pick(pool)


@dataclass(frozen=True)
class EditDistanceResolver(MatchStrategy):
    """Exact match, then the closest key within a typo allowance.

    The allowance is ``max(min_distance, len(raw) // divisor)`` so that
    "Royal Leopard" still finds "Royal Leopards" while "Mbabane" never
    reaches "Manzini".
    """

    min_distance: int = 2
    divisor: int = 4

    def _fallback(self, target, keyed):
        allowance = max(self.min_distance, len(target) // self.divisor)
        best: Optional[int] = None
        pool = []
        for name, norm, candidate in keyed:
            if not norm:
                continue
            distance = levenshtein(target, norm)
            if distance > allowance:
                continue
            if best is None or distance < best:
                best = distance
                pool = [(name, candidate)]
            elif distance == best:
                pool.append((name, candidate))
        return _pick(pool)


DEFAULT_STRATEGY = ContainmentResolver()

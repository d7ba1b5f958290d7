"""Turn external live-score payloads into candidate matches."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, List, Literal, Mapping, Optional

from pydantic import ValidationError

from leaguelog.models import Match, MatchStatus


logger = logging.getLogger(__name__)

FeedKind = Literal["fixtures", "results"]

_FEED_STATUS: Mapping[str, MatchStatus] = {
    "SCHEDULED": "scheduled",
    "TIMED": "scheduled",
    "IN_PLAY": "live",
    "PAUSED": "live",
    "LIVE": "live",
    "FINISHED": "finished",
    "AWARDED": "finished",
    "POSTPONED": "postponed",
    "CANCELLED": "cancelled",
    "CANCELED": "cancelled",
    "SUSPENDED": "suspended",
}


class FeedFormatError(ValueError):
    """Payload does not have the expected shape."""


@dataclass(frozen=True)
class FeedResult:
    """Outcome of one feed fetch; ``error`` is set when nothing usable came back."""

    candidates: List[Match] = field(default_factory=list)
    error: Optional[str] = None
    rejected: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, reason: str) -> "FeedResult":
        return cls(candidates=[], error=reason)


def _team_name(entry: Mapping[str, Any], side: str) -> str:
    team = entry.get(side) or {}
    name = team.get("name") if isinstance(team, Mapping) else None
    if not isinstance(name, str) or not name.strip():
        raise FeedFormatError(f"missing {side}.name")
    return name.strip()


def _kickoff(raw: Any) -> tuple[Optional[Any], Optional[str]]:
    if not raw:
        return None, None
    try:
        moment = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        raise FeedFormatError(f"unreadable utcDate {raw!r}") from None
    return moment.date(), moment.strftime("%H:%M")


def feed_entry_to_match(entry: Mapping[str, Any], kind: FeedKind) -> Match:
    """Convert a single football-data.org style match entry."""

    if not isinstance(entry, Mapping):
        raise FeedFormatError("match entry is not an object")
    match_date, kickoff = _kickoff(entry.get("utcDate"))
    default_status: MatchStatus = "finished" if kind == "results" else "scheduled"
    status = _FEED_STATUS.get(str(entry.get("status") or "").upper(), default_status)

    score_a = score_b = None
    if kind == "results":
        score = entry.get("score") or {}
        if not isinstance(score, Mapping):
            raise FeedFormatError("score is not an object")
        full_time = score.get("fullTime") or {}
        if not isinstance(full_time, Mapping):
            raise FeedFormatError("score.fullTime is not an object")
        score_a = full_time.get("home")
        score_b = full_time.get("away")

    try:
        return Match(
            id=entry.get("id"),
            team_a=_team_name(entry, "homeTeam"),
            team_b=_team_name(entry, "awayTeam"),
            score_a=score_a,
            score_b=score_b,
            status=status,
            match_date=match_date,
            time=kickoff,
            venue=entry.get("venue") or None,
            matchday=entry.get("matchday"),
        )
    except ValidationError as exc:
        raise FeedFormatError(f"invalid match entry: {exc.error_count()} field error(s)") from exc


def parse_feed_matches(payload: Mapping[str, Any], kind: FeedKind) -> FeedResult:
    """Parse a ``{"matches": [...]}`` payload; bad entries are listed, not raised."""

    if kind not in ("fixtures", "results"):
        raise ValueError(f"kind must be 'fixtures' or 'results', got {kind!r}")
    entries = payload.get("matches") if isinstance(payload, Mapping) else None
    if not isinstance(entries, list):
        return FeedResult.failure("Feed response did not contain a 'matches' list")

    candidates: List[Match] = []
    rejected: List[str] = []
    for position, entry in enumerate(entries):
        try:
            candidates.append(feed_entry_to_match(entry, kind))
        except FeedFormatError as exc:
            label = entry.get("id", position) if isinstance(entry, Mapping) else position
            rejected.append(f"entry {label}: {exc}")
    if rejected:
        logger.warning("Rejected %d of %d feed entries", len(rejected), len(entries))
    return FeedResult(candidates=candidates, rejected=rejected)


def fetch_candidates(fetch: Callable[[], Mapping[str, Any]], kind: FeedKind) -> FeedResult:
    """Run the caller's fetch function and parse its payload.

    Any failure inside ``fetch`` becomes a failed :class:`FeedResult` with a
    readable reason; the caller decides whether to retry.
    """

    try:
        payload = fetch()
    except Exception as exc:
        logger.warning("Feed fetch failed: %s", exc)
        return FeedResult.failure(f"Feed request failed: {exc}")
    result = parse_feed_matches(payload, kind)
    if not result.ok:
        logger.warning("Feed payload unusable: %s", result.error)
    return result

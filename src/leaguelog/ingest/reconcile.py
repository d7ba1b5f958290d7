"""Classify imported candidate matches against the existing match log."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Tuple

from pydantic import Field

from leaguelog.models import DocumentModel, Match
from leaguelog.normalize import normalize
from leaguelog.resolver import MatchStrategy, resolve_name
from leaguelog.standings import is_walkover, parse_score


logger = logging.getLogger(__name__)

ReviewStatus = Literal["new", "duplicate", "error"]
MatchKey = Tuple[str, str, date]


class ReviewedMatch(DocumentModel):
    """One candidate awaiting an administrator's decision.

    ``candidate`` is the record as received; ``match`` carries canonical
    team names wherever they resolved.
    """

    candidate: Match
    match: Match
    status: ReviewStatus
    selected: bool
    reason: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)

    @property
    def id(self) -> str:
        return self.match.id

    def with_selection(self, selected: bool) -> "ReviewedMatch":
        return self.model_copy(update={"selected": selected})

    def toggled(self) -> "ReviewedMatch":
        return self.with_selection(not self.selected)


@dataclass(frozen=True)
class MatchLog:
    fixtures: Sequence[Match] = ()
    results: Sequence[Match] = ()


@dataclass(frozen=True)
class ImportReport:
    total: int
    new: int
    duplicate: int
    error: int
    selected: int


def match_key(team_a: str, team_b: str, match_date: Optional[date]) -> Optional[MatchKey]:
    """Order-sensitive identity of a match: home, away, date."""

    if match_date is None:
        return None
    return (normalize(team_a), normalize(team_b), match_date)


def _warnings(candidate: Match) -> List[str]:
    notes: List[str] = []
    if candidate.match_date is None:
        notes.append("No match date; duplicate check skipped")
    if is_walkover(candidate):
        notes.append("Score carries a walkover marker")
    elif candidate.status == "finished" and (
        parse_score(candidate.score_a).goals is None or parse_score(candidate.score_b).goals is None
    ):
        notes.append("Finished match without a numeric score will not count in the table")
    return notes


def _existing_index(
    existing: MatchLog,
    official: Sequence[str],
    strategy: Optional[MatchStrategy],
) -> Dict[MatchKey, str]:
    index: Dict[MatchKey, str] = {}
    for label, matches in (("fixtures", existing.fixtures), ("results", existing.results)):
        for match in matches:
            home = resolve_name(match.team_a, official, strategy=strategy) or match.team_a
            away = resolve_name(match.team_b, official, strategy=strategy) or match.team_b
            key = match_key(home, away, match.match_date)
            if key is not None:
                index.setdefault(key, f"{label} (match {match.id})")
    return index


def reconcile(
    candidates: Iterable[Match],
    existing: MatchLog,
    official_team_names: Iterable[str],
    *,
    strategy: Optional[MatchStrategy] = None,
) -> List[ReviewedMatch]:
    """Review a batch of candidates.

    Unresolvable team names are ``error`` and duplicates of the log (or of
    an earlier candidate in the batch) are ``duplicate``; both start
    unselected but stay in the list so a reviewer can override them.
    Everything else is ``new`` and starts selected. ``existing`` may be a
    :class:`MatchLog` or a ``Competition``.
    """

    official = list(official_team_names)
    seen = _existing_index(existing, official, strategy)
    reviewed: List[ReviewedMatch] = []

    for candidate in candidates:
        warnings = _warnings(candidate)
        home = resolve_name(candidate.team_a, official, strategy=strategy)
        away = resolve_name(candidate.team_b, official, strategy=strategy)
        if home is None or away is None:
            missing = [name for name, hit in ((candidate.team_a, home), (candidate.team_b, away)) if hit is None]
            reason = "Unrecognised team: " + ", ".join(repr(name) for name in missing)
            reviewed.append(
                ReviewedMatch(
                    candidate=candidate,
                    match=candidate,
                    status="error",
                    selected=False,
                    reason=reason,
                    warnings=warnings,
                )
            )
            continue

        match = candidate.model_copy(update={"team_a": home, "team_b": away})
        key = match_key(home, away, candidate.match_date)
        if key is not None and key in seen:
            reviewed.append(
                ReviewedMatch(
                    candidate=candidate,
                    match=match,
                    status="duplicate",
                    selected=False,
                    reason=f"Already in {seen[key]}",
                    warnings=warnings,
                )
            )
            continue

        if key is not None:
            seen[key] = f"this batch (match {candidate.id})"
        reviewed.append(
            ReviewedMatch(candidate=candidate, match=match, status="new", selected=True, warnings=warnings)
        )

    report = summarize(reviewed)
    logger.info(
        "Reviewed %d candidates: %d new, %d duplicate, %d error",
        report.total,
        report.new,
        report.duplicate,
        report.error,
    )
    return reviewed


def summarize(reviewed: Sequence[ReviewedMatch]) -> ImportReport:
    return ImportReport(
        total=len(reviewed),
        new=sum(1 for item in reviewed if item.status == "new"),
        duplicate=sum(1 for item in reviewed if item.status == "duplicate"),
        error=sum(1 for item in reviewed if item.status == "error"),
        selected=sum(1 for item in reviewed if item.selected),
    )

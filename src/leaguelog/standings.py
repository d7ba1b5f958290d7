"""League table computation.

Tables are rebuilt from the full result log on every call; nothing is
patched incrementally, so edits and imports can never leave a table out of
step with its matches.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Tuple

from leaguelog.config import StandingsRules, default_rules
from leaguelog.models import Match, StandingsRow, Team
from leaguelog.resolver import MatchStrategy, resolve


logger = logging.getLogger(__name__)

SkipReason = Literal["status", "score", "walkover", "unknown_team", "same_team", "duplicate"]

_DIGITS = re.compile(r"\d+")
_WALKOVER_MARKER = re.compile(r"\b(?:w\s*/\s*o|wo|walk\s*-?\s*over|awarded|forfeit(?:ed)?)\b", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedScore:
    goals: Optional[int]
    walkover: bool = False
    raw: object = None


@dataclass(frozen=True)
class SkippedMatch:
    match_id: str
    reason: SkipReason


@dataclass(frozen=True)
class StandingsTable:
    rows: List[Team]
    skipped: List[SkippedMatch] = field(default_factory=list)
    counted: int = 0
    scheduled: int = 0

    @property
    def standings(self) -> List[StandingsRow]:
        return [team.standing for team in self.rows if team.standing is not None]


def parse_score(value: object) -> ParsedScore:
    """Interpret a stored score.

    Plain non-negative integers and digit strings are numeric. Strings with
    a walkover marker ("3 w/o", "W/O", "awarded 3") are flagged and carry
    their digits when there is exactly one number. Anything else has no
    goals.
    """

    if value is None or isinstance(value, bool):
        return ParsedScore(None, raw=value)
    if isinstance(value, int):
        return ParsedScore(value if value >= 0 else None, raw=value)
    if isinstance(value, float):
        return ParsedScore(int(value) if value.is_integer() and value >= 0 else None, raw=value)
    if not isinstance(value, str):
        return ParsedScore(None, raw=value)
    text = value.strip()
    if text.isdecimal():
        return ParsedScore(int(text), raw=value)
    if _WALKOVER_MARKER.search(text):
        numbers = _DIGITS.findall(text)
        goals = int(numbers[0]) if len(numbers) == 1 else None
        return ParsedScore(goals, walkover=True, raw=value)
    return ParsedScore(None, raw=value)


def is_walkover(match: Match) -> bool:
    return parse_score(match.score_a).walkover or parse_score(match.score_b).walkover


def _countable(score: ParsedScore, rules: StandingsRules) -> Tuple[Optional[int], Optional[SkipReason]]:
    if score.walkover:
        if rules.walkover_policy == "skip" or score.goals is None:
            return None, "walkover"
        return score.goals, None
    if score.goals is None:
        return None, "score"
    return score.goals, None


def chronological_key(match: Match) -> Tuple[date, str, str]:
    return (match.match_date or date.min, match.time or "", str(match.id))


@dataclass
class _Tally:
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0
    outcomes: List[Tuple[Tuple[date, str, str], str]] = field(default_factory=list)

    def record(self, scored: int, conceded: int, when, rules: StandingsRules) -> None:
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if scored > conceded:
            self.won += 1
            self.points += rules.points_win
            self.outcomes.append((when, "W"))
        elif scored < conceded:
            self.lost += 1
            self.points += rules.points_loss
            self.outcomes.append((when, "L"))
        else:
            self.drawn += 1
            self.points += rules.points_draw
            self.outcomes.append((when, "D"))

    def form(self, length: int) -> str:
        recent = sorted(self.outcomes, key=lambda item: item[0], reverse=True)[:length]
        return " ".join(letter for _, letter in recent)


def _head_to_head(
    tallies: Sequence[_Tally],
    counted: Sequence[Tuple[int, int, int, int]],
    rules: StandingsRules,
) -> Dict[int, Tuple[int, int]]:
    """Mini-league points and away goals among teams level on points."""

    by_points: Dict[int, List[int]] = defaultdict(list)
    for index, tally in enumerate(tallies):
        by_points[tally.points].append(index)

    mini: Dict[int, Tuple[int, int]] = {}
    for group in by_points.values():
        if len(group) < 2:
            continue
        members = set(group)
        points = {index: 0 for index in group}
        away_goals = {index: 0 for index in group}
        for home, away, home_goals, away_goals_scored in counted:
            if home not in members or away not in members:
                continue
            away_goals[away] += away_goals_scored
            if home_goals > away_goals_scored:
                points[home] += rules.points_win
                points[away] += rules.points_loss
            elif home_goals < away_goals_scored:
                points[away] += rules.points_win
                points[home] += rules.points_loss
            else:
                points[home] += rules.points_draw
                points[away] += rules.points_draw
        for index in group:
            mini[index] = (points[index], away_goals[index])
    return mini


def build_table(
    teams: Iterable[Team],
    results: Iterable[Match],
    fixtures: Iterable[Match] = (),
    *,
    rules: Optional[StandingsRules] = None,
    strategy: Optional[MatchStrategy] = None,
) -> StandingsTable:
    """Compute a fresh table plus the list of results that could not count.

    ``fixtures`` never contribute to the table; they are only counted so
    callers can show played-versus-total context.
    """

    rules = rules or default_rules()
    team_list = list(teams)
    indexed = list(enumerate(team_list))
    tallies = [_Tally() for _ in team_list]
    skipped: List[SkippedMatch] = []
    counted: List[Tuple[int, int, int, int]] = []
    accepted: List[Tuple[Match, int, int, int, int]] = []
    by_key: Dict[Tuple[int, int, date], int] = {}

    for match in results:
        if match.status not in rules.counted_statuses:
            skipped.append(SkippedMatch(match.id, "status"))
            continue
        goals_a, reason_a = _countable(parse_score(match.score_a), rules)
        goals_b, reason_b = _countable(parse_score(match.score_b), rules)
        if goals_a is None or goals_b is None:
            skipped.append(SkippedMatch(match.id, reason_a or reason_b or "score"))
            continue
        home = resolve(match.team_a, indexed, key=lambda item: item[1].name, strategy=strategy)
        away = resolve(match.team_b, indexed, key=lambda item: item[1].name, strategy=strategy)
        if home is None or away is None:
            skipped.append(SkippedMatch(match.id, "unknown_team"))
            continue
        if home[0] == away[0]:
            skipped.append(SkippedMatch(match.id, "same_team"))
            continue
        entry = (match, home[0], away[0], goals_a, goals_b)
        if match.match_date is None:
            accepted.append(entry)
            continue
        # One result per home/away/date; the lowest id is kept.
        key = (home[0], away[0], match.match_date)
        if key not in by_key:
            by_key[key] = len(accepted)
            accepted.append(entry)
            continue
        kept = accepted[by_key[key]][0]
        if str(match.id) < str(kept.id):
            accepted[by_key[key]] = entry
            match = kept
        skipped.append(SkippedMatch(match.id, "duplicate"))

    for match, home_index, away_index, goals_a, goals_b in accepted:
        when = chronological_key(match)
        tallies[home_index].record(goals_a, goals_b, when, rules)
        tallies[away_index].record(goals_b, goals_a, when, rules)
        counted.append((home_index, away_index, goals_a, goals_b))

    for item in skipped:
        logger.debug("Result %s excluded from table: %s", item.match_id, item.reason)

    mini = _head_to_head(tallies, counted, rules) if rules.uses_head_to_head else {}

    def sort_key(index: int) -> tuple:
        tally = tallies[index]
        name = team_list[index].name
        parts: list = []
        for step in rules.tie_breakers:
            if step == "points":
                parts.append(-tally.points)
            elif step == "head_to_head_points":
                parts.append(-mini.get(index, (0, 0))[0])
            elif step == "head_to_head_away_goals":
                parts.append(-mini.get(index, (0, 0))[1])
            elif step == "goal_difference":
                parts.append(-(tally.goals_for - tally.goals_against))
            elif step == "goals_for":
                parts.append(-tally.goals_for)
            elif step == "name":
                parts.append((name.casefold(), name))
        return tuple(parts)

    rows: List[Team] = []
    for index in sorted(range(len(team_list)), key=sort_key):
        team = team_list[index]
        tally = tallies[index]
        standing = StandingsRow(
            team_id=team.id,
            team_name=team.name,
            played=tally.played,
            won=tally.won,
            drawn=tally.drawn,
            lost=tally.lost,
            goals_for=tally.goals_for,
            goals_against=tally.goals_against,
            goal_difference=tally.goals_for - tally.goals_against,
            points=tally.points,
            form=tally.form(rules.form_length),
        )
        rows.append(team.model_copy(update={"standing": standing}))

    return StandingsTable(
        rows=rows,
        skipped=skipped,
        counted=len(counted),
        scheduled=sum(1 for _ in fixtures),
    )


def compute_standings(
    teams: Iterable[Team],
    results: Iterable[Match],
    fixtures: Iterable[Match] = (),
    *,
    rules: Optional[StandingsRules] = None,
    strategy: Optional[MatchStrategy] = None,
) -> List[Team]:
    """Return copies of ``teams`` with ``standing`` filled in, in table order."""

    return build_table(teams, results, fixtures, rules=rules, strategy=strategy).rows


def compute_group_standings(
    group_teams: Iterable[Team],
    matches: Iterable[Match],
    *,
    rules: Optional[StandingsRules] = None,
    strategy: Optional[MatchStrategy] = None,
) -> List[Team]:
    """Table for a cup group whose fixtures and results share one list."""

    match_list = list(matches)
    return compute_standings(
        group_teams,
        [m for m in match_list if m.status == "finished"],
        [m for m in match_list if m.status != "finished"],
        rules=rules,
        strategy=strategy,
    )

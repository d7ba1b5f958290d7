"""Command-line interface for league tables, scorers and feed imports."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from leaguelog.config import RULESETS, StandingsRules, get_rules, rules_from_env
from leaguelog.derived import refresh_competition
from leaguelog.documents import load_competition, load_json, load_matches
from leaguelog.ingest import (
    CommitError,
    FeedResult,
    commit,
    fetch_candidates,
    http_feed,
    is_url,
    reconcile,
    summarize,
)
from leaguelog.persistence import CompetitionStore
from leaguelog.standings import build_table
from leaguelog.stats import reconcile_players, top_scorers


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="leaguelog", description="League tables and match imports")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log unresolved names and skipped matches")
    commands = parser.add_subparsers(dest="command", required=True)

    standings = commands.add_parser("standings", help="Print the league table for a competition JSON file")
    standings.add_argument("competition", type=Path, help="Path to competition JSON")
    standings.add_argument(
        "--ruleset",
        default=None,
        choices=sorted(RULESETS),
        help="Tie-break and walkover rules (default from LEAGUELOG_RULESET)",
    )

    scorers = commands.add_parser("scorers", help="Print the top-scorer list")
    scorers.add_argument("competition", type=Path, help="Path to competition JSON")
    scorers.add_argument("--limit", type=int, default=10, help="Number of scorers to show")
    scorers.add_argument(
        "--mode",
        choices=("competition", "global"),
        default="competition",
        help="Count only this log, or add it to stored career baselines",
    )
    scorers.add_argument(
        "--extra",
        type=Path,
        action="append",
        default=[],
        help="Additional match list JSON (e.g. friendlies); may repeat",
    )
    scorers.add_argument("--report", type=Path, default=None, help="Write unresolved events JSON here")

    review = commands.add_parser("review", help="Classify feed candidates against a competition")
    review.add_argument("competition", type=Path, help="Path to competition JSON")
    review.add_argument("feed", help="Saved feed payload JSON, or an http(s) feed URL")
    review.add_argument("--kind", choices=("fixtures", "results"), default="fixtures")
    review.add_argument("--output", type=Path, default=None, help="Write the reviewed list as JSON")

    seed = commands.add_parser("seed", help="Store a competition document in the database")
    seed.add_argument("competition", type=Path, help="Path to competition JSON")
    seed.add_argument("--db", type=Path, required=True, help="SQLite database path")

    importer = commands.add_parser("import", help="Review a feed against a stored competition and commit")
    importer.add_argument("competition_id", help="Stored competition id")
    importer.add_argument("feed", help="Saved feed payload JSON, or an http(s) feed URL")
    importer.add_argument("--db", type=Path, required=True, help="SQLite database path")
    importer.add_argument("--kind", choices=("fixtures", "results"), default="results")
    importer.add_argument(
        "--include-duplicates",
        action="store_true",
        help="Also commit items flagged as duplicates",
    )
    importer.add_argument(
        "--ruleset",
        default=None,
        choices=sorted(RULESETS),
        help="Rules for the recomputed table (default from LEAGUELOG_RULESET)",
    )
    return parser.parse_args(argv)


def _rules(args: argparse.Namespace) -> StandingsRules:
    return get_rules(args.ruleset) if args.ruleset else rules_from_env()


def _feed(args: argparse.Namespace) -> FeedResult:
    if is_url(args.feed):
        return fetch_candidates(http_feed(args.feed), args.kind)
    path = Path(args.feed)
    return fetch_candidates(lambda: load_json(path), args.kind)


def _preview(names: List[str], limit: int = 5) -> str:
    preview = ", ".join(names[:limit])
    more = len(names) - limit
    return preview + (f", +{more} more" if more > 0 else "")


def _cmd_standings(args: argparse.Namespace) -> int:
    competition = load_competition(args.competition)
    table = build_table(
        competition.teams,
        competition.results,
        competition.fixtures,
        rules=_rules(args),
    )
    print(f"{'#':>2}  {'Team':<28}{'P':>3}{'W':>3}{'D':>3}{'L':>3}{'GF':>4}{'GA':>4}{'GD':>5}{'Pts':>5}  Form")
    for position, team in enumerate(table.rows, start=1):
        row = team.standing
        print(
            f"{position:>2}  {team.name:<28}{row.played:>3}{row.won:>3}{row.drawn:>3}{row.lost:>3}"
            f"{row.goals_for:>4}{row.goals_against:>4}{row.goal_difference:>+5}{row.points:>5}  {row.form}"
        )
    print(f"Counted {table.counted} results; {table.scheduled} fixtures outstanding")
    if table.skipped:
        print("Excluded results: " + _preview([f"{s.match_id} ({s.reason})" for s in table.skipped]))
    return 0


def _cmd_scorers(args: argparse.Namespace) -> int:
    competition = load_competition(args.competition)
    matches = [*competition.fixtures, *competition.results]
    for extra in args.extra:
        matches.extend(load_matches(extra))
    aggregation = reconcile_players(matches, competition.teams, args.mode)
    for position, record in enumerate(top_scorers(aggregation.teams, args.limit), start=1):
        print(f"{position:>2}. {record.name} ({record.team_name}) {record.goals}")
    if aggregation.unresolved:
        print(f"{len(aggregation.unresolved)} events could not be credited to a player")
    if args.report:
        payload = [item.to_document() for item in aggregation.unresolved]
        args.report.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote unresolved events to {args.report}")
    return 0


def _cmd_review(args: argparse.Namespace) -> int:
    competition = load_competition(args.competition)
    feed = _feed(args)
    if not feed.ok:
        print(f"Feed unavailable: {feed.error}")
        return 1
    if feed.rejected:
        print("Rejected feed entries: " + _preview(feed.rejected))
    reviewed = reconcile(feed.candidates, competition, [team.name for team in competition.teams])
    for item in reviewed:
        mark = "x" if item.selected else " "
        when = item.match.match_date.isoformat() if item.match.match_date else "no date"
        detail = f" - {item.reason}" if item.reason else ""
        print(f"[{mark}] {item.status:<9} {item.match.title} ({when}){detail}")
        for warning in item.warnings:
            print(f"      ! {warning}")
    report = summarize(reviewed)
    print(f"{report.new} new, {report.duplicate} duplicate, {report.error} error")
    if args.output:
        payload = [item.to_document() for item in reviewed]
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote review to {args.output}")
    return 0


def _cmd_seed(args: argparse.Namespace) -> int:
    store = CompetitionStore(args.db)
    competition = refresh_competition(load_competition(args.competition), rules=rules_from_env())
    record = store.save_competition(competition)
    print(f"Stored {record.competition.id} at version {record.version}")
    return 0


def _cmd_import(args: argparse.Namespace) -> int:
    store = CompetitionStore(args.db)
    record = store.get_record(args.competition_id)
    if record is None:
        print(f"Unknown competition {args.competition_id}")
        return 1
    feed = _feed(args)
    if not feed.ok:
        print(f"Feed unavailable: {feed.error}")
        return 1

    competition = record.competition
    reviewed = reconcile(feed.candidates, competition, [team.name for team in competition.teams])
    if args.include_duplicates:
        reviewed = [item.with_selection(True) if item.status == "duplicate" else item for item in reviewed]
    errors = [item.candidate.title for item in reviewed if item.status == "error"]
    if errors:
        print("Needs manual review: " + _preview(errors))
    if not any(item.selected for item in reviewed):
        print("Nothing to import")
        return 0

    try:
        commit(
            reviewed,
            store,
            args.competition_id,
            rules=_rules(args),
            expected_version=record.version,
        )
    except CommitError as exc:
        print(f"Import failed: {exc}")
        return 1
    print(f"Imported {sum(1 for item in reviewed if item.selected)} {args.kind} into {args.competition_id}")
    return 0


_COMMANDS = {
    "standings": _cmd_standings,
    "scorers": _cmd_scorers,
    "review": _cmd_review,
    "seed": _cmd_seed,
    "import": _cmd_import,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return _COMMANDS[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())

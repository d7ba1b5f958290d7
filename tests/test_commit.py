from datetime import date

import pytest

from leaguelog.ingest import CommitError, apply_import, commit, reconcile
from leaguelog.models import Competition, Match, MatchEvent, Player, Team


def _competition():
    return Competition(
        id="mtn-premier",
        name="MTN Premier League",
        teams=[
            Team(id="1", name="Mbabane Swallows", players=[Player(id="s1", name="Sabelo Ndzinisa")]),
            Team(id="2", name="Manzini Wanderers"),
            Team(id="3", name="Royal Leopards"),
        ],
        fixtures=[
            Match(id="f1", team_a="Mbabane Swallows", team_b="Manzini Wanderers", match_date=date(2024, 3, 9)),
            Match(id="f2", team_a="Royal Leopards", team_b="Manzini Wanderers", match_date=date(2024, 3, 16)),
        ],
    )


def _result(match_id, team_a, team_b, score_a, score_b, day, events=()):
    return Match(
        id=match_id,
        team_a=team_a,
        team_b=team_b,
        score_a=score_a,
        score_b=score_b,
        status="finished",
        match_date=date(2024, 3, day),
        events=list(events),
    )


def _review(competition, candidates):
    return reconcile(candidates, competition, [team.name for team in competition.teams])


class FakeTarget:
    def __init__(self, competition, error=None):
        self.competition = competition
        self.error = error
        self.calls = []

    def run_transaction(self, competition_id, apply, *, expected_version=None):
        self.calls.append((competition_id, expected_version))
        if self.error is not None:
            raise self.error
        self.competition = apply(self.competition)
        return self.competition


def test_result_replaces_matching_fixture_and_refreshes_table():
    competition = _competition()
    goal = MatchEvent(type="goal", player_name="Sabelo Ndzinisa", team_name="Mbabane Swallows")
    reviewed = _review(competition, [_result("r1", "Mbabane Swallows FC", "Manzini Wanderers", 1, 0, 9, [goal])])
    assert reviewed[0].status == "duplicate"

    updated = apply_import(competition, [item.with_selection(True) for item in reviewed])

    assert [m.id for m in updated.fixtures] == ["f2"]
    assert [m.id for m in updated.results] == ["r1"]
    assert updated.results[0].team_a == "Mbabane Swallows"
    assert updated.derived.standings[0].team_name == "Mbabane Swallows"
    assert updated.derived.standings[0].points == 3
    scorer = updated.derived.roster[0].players[0]
    assert scorer.stats.goals == 1
    # Baseline squad untouched.
    assert updated.teams[0].players[0].stats.goals == 0


def test_unselected_items_are_ignored():
    competition = _competition()
    reviewed = _review(competition, [_result("r1", "Royal Leopards", "Mbabane Swallows", 2, 2, 2)])
    reviewed = [item.with_selection(False) for item in reviewed]

    updated = apply_import(competition, reviewed)

    assert updated.results == []
    assert len(updated.fixtures) == 2


def test_fixtures_append_to_fixture_list():
    competition = _competition()
    candidate = Match(id="f9", team_a="Manzini Wanderers", team_b="Royal Leopards", match_date=date(2024, 4, 1))

    updated = apply_import(competition, _review(competition, [candidate]))

    assert [m.id for m in updated.fixtures] == ["f1", "f2", "f9"]


def test_commit_writes_through_target():
    competition = _competition()
    target = FakeTarget(competition)
    reviewed = _review(competition, [_result("r1", "Royal Leopards", "Mbabane Swallows", 0, 3, 2)])

    updated = commit(reviewed, target, competition.id, expected_version=4)

    assert target.calls == [("mtn-premier", 4)]
    assert updated.results[0].id == "r1"
    assert updated.derived.standings[0].team_name == "Mbabane Swallows"


def test_commit_without_selection_raises():
    competition = _competition()
    reviewed = _review(competition, [_result("r1", "Royal Leopards", "Mbabane Swallows", 0, 3, 2)])
    reviewed = [item.with_selection(False) for item in reviewed]
    target = FakeTarget(competition)

    with pytest.raises(ValueError, match="No matches selected"):
        commit(reviewed, target, competition.id)
    assert target.calls == []


@pytest.mark.parametrize("error", [KeyError("mtn-premier"), OSError("disk full"), CommitError("conflict")])
def test_commit_failure_is_commit_error_and_list_survives(error):
    competition = _competition()
    reviewed = _review(competition, [_result("r1", "Royal Leopards", "Mbabane Swallows", 0, 3, 2)])
    snapshot = [item.model_dump() for item in reviewed]

    with pytest.raises(CommitError):
        commit(reviewed, FakeTarget(competition, error=error), competition.id)

    assert [item.model_dump() for item in reviewed] == snapshot


def test_commit_is_idempotent_through_review():
    competition = _competition()
    target = FakeTarget(competition)
    batch = [_result("r1", "Royal Leopards", "Mbabane Swallows", 0, 3, 2)]

    commit(_review(competition, batch), target, competition.id)
    second = _review(target.competition, batch)

    assert second[0].status == "duplicate"
    assert [m.id for m in target.competition.results] == ["r1"]


def test_selected_duplicate_replaces_existing_result():
    competition = _competition()
    first = _review(competition, [_result("r1", "Royal Leopards", "Mbabane Swallows", 0, 3, 2)])
    first = apply_import(competition, first)
    corrected = _review(first, [_result("r1b", "Royal Leopards FC", "Mbabane Swallows", 0, 2, 2)])
    assert corrected[0].status == "duplicate"

    updated = apply_import(first, [item.with_selection(True) for item in corrected])

    assert [m.id for m in updated.results] == ["r1b"]
    top = updated.derived.standings[0]
    assert (top.team_name, top.played, top.points, top.goals_for) == ("Mbabane Swallows", 1, 3, 2)

from datetime import date

import pytest

from leaguelog.editing import merge_teams, rename_team_in_matches
from leaguelog.models import Competition, Match, MatchEvent, Player, PlayerOfTheMatch, Team


def _match(match_id, team_a, team_b, **extra):
    return Match(id=match_id, team_a=team_a, team_b=team_b, match_date=date(2024, 3, 2), **extra)


def test_rename_touches_sides_events_and_potm():
    matches = [
        _match(
            "1",
            "Swallows F.C.",
            "Royal Leopards",
            events=[
                MatchEvent(type="goal", team_name="swallows", player_name="Sabelo Ndzinisa"),
                MatchEvent(type="goal", team_name="Royal Leopards", player_name="Felix Badenhorst"),
            ],
            player_of_the_match=PlayerOfTheMatch(name="Sabelo Ndzinisa", team_name="Swallows"),
        ),
        _match("2", "Royal Leopards", "Green Mamba"),
    ]

    renamed = rename_team_in_matches(matches, "Swallows", "Mbabane Swallows")

    assert renamed[0].team_a == "Mbabane Swallows"
    assert [event.team_name for event in renamed[0].events] == ["Mbabane Swallows", "Royal Leopards"]
    assert renamed[0].player_of_the_match.team_name == "Mbabane Swallows"
    assert renamed[1] is matches[1]
    assert matches[0].team_a == "Swallows F.C."


def _competition():
    return Competition(
        id="league",
        name="League",
        teams=[
            Team(id="1", name="Mbabane Swallows", players=[Player(id="p1", name="Sabelo Ndzinisa")]),
            Team(id="2", name="Swallows Reserves", players=[Player(id="p1", name="Dup"), Player(id="p2", name="Tony")]),
            Team(id="3", name="Royal Leopards"),
        ],
        results=[
            _match("r1", "Swallows Reserves", "Royal Leopards", score_a=2, score_b=0, status="finished"),
            _match("r2", "Mbabane Swallows", "Royal Leopards", score_a=1, score_b=1, status="finished"),
        ],
    )


def test_merge_teams_folds_squad_and_matches():
    merged = merge_teams(_competition(), "1", "2")

    assert [team.id for team in merged.teams] == ["1", "3"]
    assert [player.id for player in merged.teams[0].players] == ["p1", "p2"]
    assert merged.teams[0].players[0].name == "Sabelo Ndzinisa"
    assert merged.results[0].team_a == "Mbabane Swallows"
    top = merged.derived.standings[0]
    assert (top.team_name, top.played, top.points) == ("Mbabane Swallows", 2, 4)


def test_merge_rejects_same_and_unknown_ids():
    with pytest.raises(ValueError):
        merge_teams(_competition(), "1", "1")
    with pytest.raises(KeyError):
        merge_teams(_competition(), "1", "99")

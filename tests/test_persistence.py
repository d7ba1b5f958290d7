import sqlite3
from datetime import date

import pytest

from leaguelog.ingest import CommitError, ConcurrentModificationError, commit, reconcile
from leaguelog.models import Competition, Match, Team
from leaguelog.persistence import CompetitionStore


def _competition(name="MTN Premier League"):
    return Competition(
        id="mtn-premier",
        name=name,
        teams=[Team(id="1", name="Mbabane Swallows"), Team(id="2", name="Royal Leopards")],
    )


@pytest.fixture
def store(tmp_path, monkeypatch):
    monkeypatch.delenv("LEAGUELOG_DB_PATH", raising=False)
    return CompetitionStore(tmp_path / "league.db")


def test_save_and_load_round_trip(store):
    record = store.save_competition(_competition())

    assert record.version == 1
    assert store.get_competition("mtn-premier") == _competition()
    assert store.get_record("missing") is None


def test_save_bumps_version(store):
    store.save_competition(_competition())
    record = store.save_competition(_competition(name="Premier League"))

    assert record.version == 2
    assert record.competition.name == "Premier League"
    assert [r.competition.id for r in store.list_competitions()] == ["mtn-premier"]


def test_delete(store):
    store.save_competition(_competition())
    assert store.delete_competition("mtn-premier")
    assert not store.delete_competition("mtn-premier")


def test_run_transaction_writes_and_bumps_version(store):
    store.save_competition(_competition())

    updated = store.run_transaction("mtn-premier", lambda c: c.model_copy(update={"name": "Renamed"}))

    assert updated.name == "Renamed"
    record = store.get_record("mtn-premier")
    assert record.version == 2
    assert record.competition.name == "Renamed"


def test_run_transaction_missing_competition(store):
    with pytest.raises(KeyError):
        store.run_transaction("missing", lambda c: c)


def test_stale_expected_version_rejected(store):
    store.save_competition(_competition())
    store.save_competition(_competition())

    with pytest.raises(ConcurrentModificationError):
        store.run_transaction("mtn-premier", lambda c: c, expected_version=1)
    assert store.get_record("mtn-premier").version == 2


def test_write_between_read_and_update_rejected(store):
    store.save_competition(_competition())

    def apply(current):
        # Someone else saves while this transaction is working.
        store.save_competition(_competition(name="Concurrent"))
        return current.model_copy(update={"name": "Mine"})

    with pytest.raises(ConcurrentModificationError):
        store.run_transaction("mtn-premier", apply)
    assert store.get_competition("mtn-premier").name == "Concurrent"


def test_changing_id_is_rejected(store):
    store.save_competition(_competition())
    with pytest.raises(ValueError):
        store.run_transaction("mtn-premier", lambda c: c.model_copy(update={"id": "other"}))


def test_commit_against_store(store):
    competition = _competition()
    record = store.save_competition(competition)
    candidate = Match(
        id="r1",
        team_a="Royal Leopards",
        team_b="Mbabane Swallows FC",
        score_a=1,
        score_b=1,
        status="finished",
        match_date=date(2024, 3, 2),
    )
    reviewed = reconcile([candidate], competition, ["Mbabane Swallows", "Royal Leopards"])

    commit(reviewed, store, "mtn-premier", expected_version=record.version)

    stored = store.get_record("mtn-premier")
    assert stored.version == 2
    assert stored.competition.results[0].team_b == "Mbabane Swallows"
    assert [row.points for row in stored.competition.derived.standings] == [1, 1]


def test_commit_with_stale_version_leaves_store_untouched(store):
    competition = _competition()
    store.save_competition(competition)
    store.save_competition(competition)
    candidate = Match(
        id="r1",
        team_a="Royal Leopards",
        team_b="Mbabane Swallows",
        score_a=1,
        score_b=0,
        status="finished",
        match_date=date(2024, 3, 2),
    )
    reviewed = reconcile([candidate], competition, ["Mbabane Swallows", "Royal Leopards"])

    with pytest.raises(CommitError):
        commit(reviewed, store, "mtn-premier", expected_version=1)

    assert store.get_competition("mtn-premier").results == []


def test_env_override(tmp_path, monkeypatch):
    target = tmp_path / "from-env.db"
    monkeypatch.setenv("LEAGUELOG_DB_PATH", str(target))

    CompetitionStore(tmp_path / "ignored.db").save_competition(_competition())

    assert target.exists()
    assert not (tmp_path / "ignored.db").exists()


def _track_connections(store, monkeypatch):
    opened = []
    connect = store._connect

    def tracking():
        conn = connect()
        opened.append(conn)
        return conn

    monkeypatch.setattr(store, "_connect", tracking)
    return opened


def _assert_closed(connections):
    assert connections
    for conn in connections:
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")


def test_connections_are_closed_after_use(store, monkeypatch):
    opened = _track_connections(store, monkeypatch)

    store.save_competition(_competition())
    store.list_competitions()
    store.run_transaction("mtn-premier", lambda c: c.model_copy(update={"name": "Renamed"}))
    store.delete_competition("mtn-premier")

    _assert_closed(opened)


def test_connection_closed_when_update_is_rejected(store, monkeypatch):
    store.save_competition(_competition())
    opened = _track_connections(store, monkeypatch)

    def apply(current):
        store.save_competition(_competition(name="Concurrent"))
        return current.model_copy(update={"name": "Mine"})

    with pytest.raises(ConcurrentModificationError):
        store.run_transaction("mtn-premier", apply)

    _assert_closed(opened)
    assert store.get_competition("mtn-premier").name == "Concurrent"

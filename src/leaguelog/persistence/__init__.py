"""SQLite persistence for competition documents."""

from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import closing
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from leaguelog.ingest.commit import CommitError, ConcurrentModificationError
from leaguelog.models import Competition


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "LEAGUELOG_DB_PATH"


@dataclass
class CompetitionRecord:
    competition: Competition
    version: int
    created_at: datetime
    updated_at: datetime


class CompetitionStore:
    """SQLite-backed store holding one JSON document per competition.

    The match log and its derived standings live in the same document, so
    every write replaces both or neither. ``version`` increases on each
    write and guards :meth:`run_transaction` against lost updates.
    """

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv(_DB_PATH_ENV)
        target = env_db or db_path
        if isinstance(target, str) and target.startswith("file:"):
            self.db_path: Path | str = target
            self._use_uri = True
        else:
            self.db_path = Path(target)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with closing(self._connect()) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS competitions (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    version INTEGER NOT NULL,
                    document_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def save_competition(self, competition: Competition) -> CompetitionRecord:
        """Insert or overwrite a competition, bumping its version."""

        now = datetime.now(timezone.utc).isoformat()
        document = competition.model_dump_json(by_alias=True, exclude_none=True)
        with closing(self._connect()) as conn:
            conn.execute(
                """
                INSERT INTO competitions (id, name, version, document_json, created_at, updated_at)
                VALUES (?, ?, 1, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    version = competitions.version + 1,
                    document_json = excluded.document_json,
                    updated_at = excluded.updated_at
                """,
                (competition.id, competition.name, document, now, now),
            )
            conn.commit()
        record = self.get_record(competition.id)
        if record is None:  # pragma: no cover
            raise KeyError(f"Competition {competition.id} not found after save")
        return record

    def get_record(self, competition_id: str) -> Optional[CompetitionRecord]:
        with closing(self._connect()) as conn:
            row = conn.execute("SELECT * FROM competitions WHERE id = ?", (competition_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    def get_competition(self, competition_id: str) -> Optional[Competition]:
        record = self.get_record(competition_id)
        return record.competition if record else None

    def list_competitions(self, limit: int = 50) -> List[CompetitionRecord]:
        with closing(self._connect()) as conn:
            rows = conn.execute(
                "SELECT * FROM competitions ORDER BY name, id LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def delete_competition(self, competition_id: str) -> bool:
        with closing(self._connect()) as conn:
            cursor = conn.execute("DELETE FROM competitions WHERE id = ?", (competition_id,))
            conn.commit()
        return cursor.rowcount > 0

    def run_transaction(
        self,
        competition_id: str,
        apply: Callable[[Competition], Competition],
        *,
        expected_version: Optional[int] = None,
    ) -> Competition:
        """Read, transform and write back one competition.

        The write only lands if the stored version is still the one that
        was read (or ``expected_version``, when the caller read earlier).
        """

        record = self.get_record(competition_id)
        if record is None:
            raise KeyError(f"Competition {competition_id} not found")
        if expected_version is not None and record.version != expected_version:
            raise ConcurrentModificationError(
                f"Competition {competition_id} is at version {record.version}, expected {expected_version}"
            )

        updated = apply(record.competition)
        if updated.id != competition_id:
            raise ValueError(f"Transaction changed competition id to {updated.id!r}")

        document = updated.model_dump_json(by_alias=True, exclude_none=True)
        now = datetime.now(timezone.utc).isoformat()
        try:
            with closing(self._connect()) as conn:
                cursor = conn.execute(
                    """
                    UPDATE competitions
                    SET name = ?,
                        document_json = ?,
                        version = version + 1,
                        updated_at = ?
                    WHERE id = ? AND version = ?
                    """,
                    (updated.name, document, now, competition_id, record.version),
                )
                if cursor.rowcount != 1:
                    raise ConcurrentModificationError(
                        f"Competition {competition_id} changed since version {record.version}"
                    )
                conn.commit()
        except sqlite3.Error as exc:
            raise CommitError(f"Could not write competition {competition_id}: {exc}") from exc

        logger.debug("Competition %s written at version %d", competition_id, record.version + 1)
        return updated

    def _row_to_record(self, row: sqlite3.Row) -> CompetitionRecord:
        return CompetitionRecord(
            competition=Competition.model_validate_json(row["document_json"]),
            version=int(row["version"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


__all__ = ["CompetitionRecord", "CompetitionStore"]

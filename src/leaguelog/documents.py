"""Load and save competition and match JSON documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

from pydantic import TypeAdapter

from leaguelog.models import Competition, Match


_MATCH_LIST = TypeAdapter(List[Match])


def load_competition(path: Path) -> Competition:
    return Competition.model_validate_json(path.read_text(encoding="utf-8"))


def save_competition(path: Path, competition: Competition) -> None:
    path.write_text(json.dumps(competition.to_document(), indent=2), encoding="utf-8")


def load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def load_matches(path: Path) -> List[Match]:
    """Read a bare list of matches or a ``{"matches": [...]}`` wrapper."""

    data = load_json(path)
    if isinstance(data, dict):
        data = data.get("matches", [])
    return _MATCH_LIST.validate_python(data)

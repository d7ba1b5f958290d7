"""Canonical matching keys for free-text team and player names."""

from __future__ import annotations

import unicodedata
from typing import Optional


_DELETED_CHARS = {".", "'", "’"}
_AFFIX_TOKENS = (("football", "club"), ("association",), ("fc",))


def _strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _strip_affixes(tokens: list[str]) -> list[str]:
    changed = True
    while changed:
        changed = False
        for affix in _AFFIX_TOKENS:
            size = len(affix)
            if len(tokens) <= size:
                continue
            if tuple(tokens[-size:]) == affix:
                tokens = tokens[:-size]
                changed = True
            elif tuple(tokens[:size]) == affix:
                tokens = tokens[size:]
                changed = True
    return tokens


def normalize(raw: Optional[str]) -> str:
    """Return the matching key for ``raw``.

    "Mbabane Swallows FC", "MBABANE SWALLOWS F.C." and "mbabane swallows"
    all map to ``"mbabane swallows"``. The key is for comparison only and
    must never be shown to users.
    """

    if not raw:
        return ""
    text = _strip_diacritics(raw).lower().replace("&", " and ")
    cleaned = []
    for ch in text:
        if ch in _DELETED_CHARS:
            continue
        cleaned.append(ch if ch.isalnum() or ch.isspace() else " ")
    tokens = "".join(cleaned).split()
    return " ".join(_strip_affixes(tokens))

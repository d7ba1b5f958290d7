"""HTTP fetchers for live-score feeds."""

from __future__ import annotations

import os
from typing import Any, Callable, Mapping, Optional

import httpx


_TOKEN_ENV = "LEAGUELOG_FEED_TOKEN"


def http_feed(
    url: str,
    *,
    token: Optional[str] = None,
    timeout: float = 10.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> Callable[[], Mapping[str, Any]]:
    """Return a fetch callable for :func:`fetch_candidates`.

    The token (or ``LEAGUELOG_FEED_TOKEN``) is sent as ``X-Auth-Token``.
    Non-2xx responses raise ``httpx.HTTPStatusError`` when the callable runs.
    """

    headers = {}
    auth = token or os.getenv(_TOKEN_ENV)
    if auth:
        headers["X-Auth-Token"] = auth

    def fetch() -> Mapping[str, Any]:
        with httpx.Client(timeout=timeout, headers=headers, transport=transport) as client:
            resp = client.get(url)
            resp.raise_for_status()
            return resp.json()

    return fetch


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))

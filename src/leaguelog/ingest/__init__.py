"""Import pipeline: external feeds, review and atomic commit."""

from .commit import (
    CommitError,
    ConcurrentModificationError,
    TransactionTarget,
    apply_import,
    commit,
    is_result,
)
from .feeds import (
    FeedFormatError,
    FeedKind,
    FeedResult,
    feed_entry_to_match,
    fetch_candidates,
    parse_feed_matches,
)
from .http import http_feed, is_url
from .reconcile import (
    ImportReport,
    MatchLog,
    ReviewedMatch,
    ReviewStatus,
    match_key,
    reconcile,
    summarize,
)

__all__ = [
    "CommitError",
    "ConcurrentModificationError",
    "FeedFormatError",
    "FeedKind",
    "FeedResult",
    "ImportReport",
    "MatchLog",
    "ReviewStatus",
    "ReviewedMatch",
    "TransactionTarget",
    "apply_import",
    "commit",
    "feed_entry_to_match",
    "fetch_candidates",
    "http_feed",
    "is_url",
    "is_result",
    "match_key",
    "parse_feed_matches",
    "reconcile",
    "summarize",
]

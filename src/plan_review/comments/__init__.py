"""Comment anchoring and storage."""

from plan_review.comments.address import (
    AddressResolver,
    new_line_key,
    old_line_key,
    parse_line_key,
)
from plan_review.comments.store import (
    DEFAULT_PROMPT_HEADER,
    Comment,
    CommentStore,
    CommentStoreState,
    compute_pair_hash,
    highlight_changes,
)

__all__ = [
    "DEFAULT_PROMPT_HEADER",
    "AddressResolver",
    "Comment",
    "CommentStore",
    "CommentStoreState",
    "compute_pair_hash",
    "highlight_changes",
    "new_line_key",
    "old_line_key",
    "parse_line_key",
]

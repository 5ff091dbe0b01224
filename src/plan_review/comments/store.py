"""Comment storage and prompt serialization.

Comments are keyed by line address (``new:N`` / ``old:N``) and are only
meaningful for the document pair they were made against.  The store
remembers a content hash of that pair and empties itself as soon as a
different pair is tracked.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from enum import StrEnum
from typing import Iterable, Iterator

from pydantic import BaseModel

from plan_review.comments.address import parse_line_key

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_HEADER = (
    "I've made the following comments on the plan, please act on them:"
)


class Comment(BaseModel):
    """A free-text comment anchored to one line."""

    key: str
    source_line_text: str
    comment_text: str
    display_label: str
    sort_key: int


class CommentStoreState(StrEnum):
    EMPTY = "empty"
    POPULATED = "populated"


def compute_pair_hash(old_content: str, new_content: str) -> str:
    """Hex SHA-256 identifying an (old, new) document pair."""
    digest = hashlib.sha256()
    for part in (old_content, new_content):
        encoded = part.encode("utf-8")
        # Length prefix keeps ("ab", "c") distinct from ("a", "bc").
        digest.update(len(encoded).to_bytes(8, "big"))
        digest.update(encoded)
    return digest.hexdigest()


class CommentStore:
    """Ordered, lock-guarded map of comments for one document pair.

    Args:
        prompt_header: First line of :meth:`serialize` output.
    """

    def __init__(self, prompt_header: str = DEFAULT_PROMPT_HEADER) -> None:
        self._prompt_header = prompt_header
        self._comments: dict[str, Comment] = {}
        self._pair_hash: str | None = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Document identity
    # ------------------------------------------------------------------

    def track_documents(self, old_content: str, new_content: str) -> bool:
        """Bind the store to a document pair.

        If the pair differs from the previously tracked one every comment
        is dropped in the same critical section that records the new pair.

        Returns:
            ``True`` if the pair changed.
        """
        pair_hash = compute_pair_hash(old_content, new_content)
        with self._lock:
            if pair_hash == self._pair_hash:
                return False
            if self._comments:
                logger.info(
                    "Document pair changed; discarding %d comment(s)",
                    len(self._comments),
                )
            self._comments.clear()
            self._pair_hash = pair_hash
            return True

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(
        self,
        key: str,
        source_line_text: str,
        comment_text: str,
        display_label: str,
        sort_key: int,
    ) -> Comment:
        """Insert or overwrite the comment for *key*.

        An overwritten key keeps its original insertion position for
        tie-breaking.
        """
        comment = Comment(
            key=key,
            source_line_text=source_line_text,
            comment_text=comment_text,
            display_label=display_label,
            sort_key=sort_key,
        )
        with self._lock:
            self._comments[key] = comment
        return comment

    def remove(self, key: str) -> None:
        """Remove the comment for *key*; a no-op if there is none."""
        with self._lock:
            self._comments.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._comments.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> CommentStoreState:
        return CommentStoreState.POPULATED if self._comments else CommentStoreState.EMPTY

    def __len__(self) -> int:
        return len(self._comments)

    def __contains__(self, key: object) -> bool:
        return key in self._comments

    def get(self, key: str) -> Comment | None:
        return self._comments.get(key)

    def keys(self) -> set[str]:
        with self._lock:
            return set(self._comments)

    def iter_sorted(self) -> Iterator[Comment]:
        """Return a fresh iterator over comments by ascending sort key.

        Ties keep insertion order.  Each call starts a new pass over a
        snapshot of the store.
        """
        with self._lock:
            snapshot = list(self._comments.values())
        return iter(sorted(snapshot, key=lambda c: c.sort_key))

    def serialize(self) -> str:
        """Build the prompt text for all comments.

        Returns:
            An empty string when there are no comments; otherwise the
            header, a blank line, and one two-line entry per comment
            separated by blank lines.
        """
        entries = [
            f"{c.display_label}: `{c.source_line_text}`\nComment: {c.comment_text}"
            for c in self.iter_sorted()
        ]
        if not entries:
            return ""
        return f"{self._prompt_header}\n\n" + "\n\n".join(entries)


def highlight_changes(
    previous: Iterable[str], current: Iterable[str]
) -> list[tuple[str, bool]]:
    """Compute highlight transitions between two sets of commented keys.

    Returns:
        ``(key, highlighted)`` pairs for every key whose highlight state
        differs between *previous* and *current*, in line order (new-side
        keys before old-side keys, unparseable keys last).
    """
    before = set(previous)
    after = set(current)
    changes = [(key, True) for key in after - before]
    changes += [(key, False) for key in before - after]
    return sorted(changes, key=lambda change: _line_order(change[0]))


def _line_order(key: str) -> tuple[int, str, int, str]:
    parsed = parse_line_key(key)
    if parsed is None:
        return (1, "", 0, key)
    side, line_no = parsed
    return (0, side, line_no, key)

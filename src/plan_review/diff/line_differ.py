"""Line-level diffing between two revisions of a document.

Documents are tokenized into newline-terminated lines and compared with
:class:`difflib.SequenceMatcher`.  The result is an ordered list of
:class:`DiffOp` runs, each carrying the exact text it covers, so either
side of the comparison can be rebuilt from the ops alone.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Iterable

from plan_review.diff.types import DiffOpKind


@dataclass(frozen=True)
class DiffOp:
    """A contiguous run of lines that are equal, inserted or deleted."""

    kind: DiffOpKind
    text: str

    @property
    def line_count(self) -> int:
        return count_lines(self.text)


def split_lines(text: str) -> list[str]:
    """Split *text* into lines without their terminators.

    A single trailing ``\\n`` does not produce an extra empty line, and an
    empty string yields one zero-length line rather than no lines.
    """
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def count_lines(text: str) -> int:
    """Return the number of display lines in *text* (at least 1)."""
    return len(split_lines(text))


def normalize_newlines(text: str) -> str:
    """Normalize ``\\r\\n`` and ``\\r`` line endings to ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _tokenize(text: str) -> list[str]:
    """Split *text* into lines that keep their ``\\n`` terminator."""
    if not text:
        return []
    lines = text.split("\n")
    tokens = [line + "\n" for line in lines[:-1]]
    if lines[-1]:
        # Final line without a trailing newline.
        tokens.append(lines[-1])
    return tokens


class LineDiffer:
    """Stateless line differ: (old, new) -> ordered ``DiffOp`` list."""

    @staticmethod
    def diff(old_content: str, new_content: str) -> list[DiffOp]:
        """Compute the line diff between *old_content* and *new_content*.

        ``replace`` regions are reported as a ``DELETE`` followed by an
        ``INSERT``.  Adjacent ops of the same kind are coalesced and
        zero-length ops are never emitted.

        Args:
            old_content: The previous revision.
            new_content: The current revision.

        Returns:
            The ordered op list.  Empty when both inputs are empty.
        """
        old_tokens = _tokenize(old_content)
        new_tokens = _tokenize(new_content)

        matcher = difflib.SequenceMatcher(
            isjunk=None, a=old_tokens, b=new_tokens, autojunk=False
        )

        ops: list[DiffOp] = []
        for tag, a0, a1, b0, b1 in matcher.get_opcodes():
            if tag == "equal":
                _append(ops, DiffOpKind.EQUAL, "".join(old_tokens[a0:a1]))
            elif tag == "delete":
                _append(ops, DiffOpKind.DELETE, "".join(old_tokens[a0:a1]))
            elif tag == "insert":
                _append(ops, DiffOpKind.INSERT, "".join(new_tokens[b0:b1]))
            else:  # replace
                _append(ops, DiffOpKind.DELETE, "".join(old_tokens[a0:a1]))
                _append(ops, DiffOpKind.INSERT, "".join(new_tokens[b0:b1]))
        return ops

    @staticmethod
    def has_changes(ops: Iterable[DiffOp]) -> bool:
        """Return ``True`` if any op is not ``EQUAL``."""
        return any(op.kind != DiffOpKind.EQUAL for op in ops)


def _append(ops: list[DiffOp], kind: DiffOpKind, text: str) -> None:
    if not text:
        return
    if ops and ops[-1].kind == kind:
        ops[-1] = DiffOp(kind, ops[-1].text + text)
    else:
        ops.append(DiffOp(kind, text))


def old_text(ops: Iterable[DiffOp]) -> str:
    """Rebuild the old document from ``EQUAL`` and ``DELETE`` ops."""
    return "".join(op.text for op in ops if op.kind != DiffOpKind.INSERT)


def new_text(ops: Iterable[DiffOp]) -> str:
    """Rebuild the new document from ``EQUAL`` and ``INSERT`` ops."""
    return "".join(op.text for op in ops if op.kind != DiffOpKind.DELETE)

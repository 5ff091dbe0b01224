"""Context-padded hunks for the raw-text (unified / split) view.

The op list is expanded into numbered :class:`DiffLine` rows.  Every
changed row is widened by ``context_lines`` on both sides, overlapping
windows are merged, and each maximal run of visible rows becomes a
:class:`Hunk`.  Rows outside every window are hidden and reported as
gaps so the caller can render "N lines hidden" separators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from plan_review.diff.line_differ import DiffOp, split_lines
from plan_review.diff.types import DiffType

DEFAULT_CONTEXT_LINES = 3


@dataclass(frozen=True)
class DiffLine:
    """One row of the raw-text diff.

    Removed rows have no ``new_line_no``; added rows have no
    ``old_line_no``.  Both numbers are 1-based.
    """

    diff_type: DiffType
    text: str
    old_line_no: int | None
    new_line_no: int | None

    @property
    def prefix(self) -> str:
        if self.diff_type == DiffType.ADDED:
            return "+"
        if self.diff_type == DiffType.REMOVED:
            return "-"
        return " "


@dataclass(frozen=True)
class Hunk:
    """A contiguous run of visible diff rows."""

    lines: tuple[DiffLine, ...]
    gap_before: int = 0
    gap_after: int = 0

    @property
    def old_start(self) -> int:
        """First old line number covered (0 when the hunk has none)."""
        for line in self.lines:
            if line.old_line_no is not None:
                return line.old_line_no
        return 0

    @property
    def new_start(self) -> int:
        """First new line number covered (0 when the hunk has none)."""
        for line in self.lines:
            if line.new_line_no is not None:
                return line.new_line_no
        return 0

    @property
    def old_count(self) -> int:
        return sum(1 for line in self.lines if line.old_line_no is not None)

    @property
    def new_count(self) -> int:
        return sum(1 for line in self.lines if line.new_line_no is not None)

    @property
    def header(self) -> str:
        """Unified-diff style ``@@ -a,b +c,d @@`` header."""
        return (
            f"@@ -{self.old_start},{self.old_count} "
            f"+{self.new_start},{self.new_count} @@"
        )


@dataclass(frozen=True)
class SplitRow:
    """One row of the split layout; ``None`` marks a padding cell."""

    left: DiffLine | None
    right: DiffLine | None


def diff_lines(ops: Iterable[DiffOp]) -> list[DiffLine]:
    """Expand diff ops into numbered rows."""
    rows: list[DiffLine] = []
    old_line = 1
    new_line = 1
    for op in ops:
        diff_type = DiffType.from_op_kind(op.kind)
        for text in split_lines(op.text):
            if diff_type == DiffType.ADDED:
                rows.append(DiffLine(diff_type, text, None, new_line))
                new_line += 1
            elif diff_type == DiffType.REMOVED:
                rows.append(DiffLine(diff_type, text, old_line, None))
                old_line += 1
            else:
                rows.append(DiffLine(diff_type, text, old_line, new_line))
                old_line += 1
                new_line += 1
    return rows


class HunkBuilder:
    """Groups diff rows into context-padded hunks.

    Args:
        context_lines: Unchanged rows shown around each change.

    Raises:
        ValueError: If *context_lines* is negative.
    """

    def __init__(self, context_lines: int = DEFAULT_CONTEXT_LINES) -> None:
        if context_lines < 0:
            raise ValueError(
                f"context_lines must be non-negative, got {context_lines}"
            )
        self._context_lines = context_lines

    @property
    def context_lines(self) -> int:
        return self._context_lines

    def build(self, ops: Iterable[DiffOp]) -> list[Hunk]:
        """Build hunks from *ops*.

        Returns:
            The hunks in document order; an empty list when nothing
            changed.
        """
        rows = diff_lines(ops)
        changed = [i for i, row in enumerate(rows) if row.diff_type != DiffType.CONTEXT]
        if not changed:
            return []

        last = len(rows) - 1
        visible: set[int] = set()
        for idx in changed:
            lo = max(0, idx - self._context_lines)
            hi = min(last, idx + self._context_lines)
            visible.update(range(lo, hi + 1))

        runs: list[list[int]] = []
        for idx in sorted(visible):
            if runs and idx == runs[-1][-1] + 1:
                runs[-1].append(idx)
            else:
                runs.append([idx])

        hunks: list[Hunk] = []
        for n, run in enumerate(runs):
            prev_end = runs[n - 1][-1] if n > 0 else -1
            next_start = runs[n + 1][0] if n + 1 < len(runs) else last + 1
            hunks.append(
                Hunk(
                    lines=tuple(rows[i] for i in run),
                    gap_before=run[0] - prev_end - 1,
                    gap_after=next_start - run[-1] - 1,
                )
            )
        return hunks


def pair_split_rows(hunk: Hunk) -> list[SplitRow]:
    """Lay out *hunk* as side-by-side rows.

    Removed rows are buffered and paired positionally with the added rows
    that follow them; the shorter side is padded with ``None``.  Context
    rows flush the buffer and appear on both sides.
    """
    rows: list[SplitRow] = []
    removed: list[DiffLine] = []
    added: list[DiffLine] = []

    def flush() -> None:
        for i in range(max(len(removed), len(added))):
            rows.append(
                SplitRow(
                    left=removed[i] if i < len(removed) else None,
                    right=added[i] if i < len(added) else None,
                )
            )
        removed.clear()
        added.clear()

    for line in hunk.lines:
        if line.diff_type == DiffType.CONTEXT:
            flush()
            rows.append(SplitRow(left=line, right=line))
        elif line.diff_type == DiffType.REMOVED:
            if added:
                # A removed row after added rows starts a new pairing group.
                flush()
            removed.append(line)
        else:
            added.append(line)
    flush()
    return rows

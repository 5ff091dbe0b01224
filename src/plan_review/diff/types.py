"""Enums shared by the diff, section and render layers."""

from __future__ import annotations

from enum import StrEnum


class DiffOpKind(StrEnum):
    """Kind of a single line-diff operation."""

    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"


class DiffType(StrEnum):
    """Per-line diff coloring used by every display mode."""

    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"

    @classmethod
    def from_op_kind(cls, kind: DiffOpKind) -> DiffType:
        """Return the line coloring for content of a diff op of *kind*."""
        return _OP_DIFF_TYPES[kind]


_OP_DIFF_TYPES = {
    DiffOpKind.EQUAL: DiffType.CONTEXT,
    DiffOpKind.INSERT: DiffType.ADDED,
    DiffOpKind.DELETE: DiffType.REMOVED,
}


class SectionKind(StrEnum):
    """Semantic type of a reconciled section.

    ``MODIFIED`` is a delete immediately followed by an insert, shown as a
    removed run and an added run of the same section.
    """

    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"

    @classmethod
    def from_diff_type(cls, diff_type: DiffType) -> SectionKind:
        """Return the section kind for a single-run section of *diff_type*."""
        return cls(diff_type.value)

    @property
    def diff_type(self) -> DiffType | None:
        """Line coloring of a single-run section; ``None`` for ``MODIFIED``."""
        if self == SectionKind.MODIFIED:
            return None
        return DiffType(self.value)


class ViewMode(StrEnum):
    """Side-by-side or single-column layout, for both display modes."""

    UNIFIED = "unified"
    SPLIT = "split"

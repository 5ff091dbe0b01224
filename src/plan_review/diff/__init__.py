"""Line diffing, hunk building and section reconciliation."""

from plan_review.diff.hunks import (
    DEFAULT_CONTEXT_LINES,
    DiffLine,
    Hunk,
    HunkBuilder,
    SplitRow,
    diff_lines,
    pair_split_rows,
)
from plan_review.diff.line_differ import (
    DiffOp,
    LineDiffer,
    count_lines,
    new_text,
    normalize_newlines,
    old_text,
    split_lines,
)
from plan_review.diff.sections import (
    FlatLine,
    Section,
    SectionMap,
    SectionReconciler,
    flatten_sections,
)
from plan_review.diff.types import DiffOpKind, DiffType, SectionKind, ViewMode

__all__ = [
    "DEFAULT_CONTEXT_LINES",
    "DiffLine",
    "DiffOp",
    "DiffOpKind",
    "DiffType",
    "FlatLine",
    "Hunk",
    "HunkBuilder",
    "LineDiffer",
    "Section",
    "SectionKind",
    "SectionMap",
    "SectionReconciler",
    "SplitRow",
    "ViewMode",
    "count_lines",
    "diff_lines",
    "flatten_sections",
    "new_text",
    "normalize_newlines",
    "old_text",
    "pair_split_rows",
    "split_lines",
]

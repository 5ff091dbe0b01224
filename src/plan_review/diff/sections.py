"""Section reconciliation and line flattening for the structured view.

A *section* is a semantically typed run of diff content.  Adjacent
delete + insert ops are merged into a single ``MODIFIED`` section so the
structured view can show the replaced text directly above its
replacement.  Every section records where it starts in the new document,
which is what lets a click inside rendered markdown be mapped back to an
absolute line number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from plan_review.diff.line_differ import DiffOp, count_lines, split_lines
from plan_review.diff.types import DiffOpKind, DiffType, SectionKind

SECTION_ID_PREFIX = "section-"


def section_id(index: int) -> str:
    """Return the deterministic ID of the section at *index*."""
    return f"{SECTION_ID_PREFIX}{index}"


@dataclass(frozen=True)
class Section:
    """A reconciled diff section.

    ``text`` holds the content of context, added and removed sections.
    Modified sections use ``removed_text`` and ``added_text`` instead.
    ``new_start_line`` is ``None`` only for removed sections.
    """

    id: str
    index: int
    kind: SectionKind
    new_start_line: int | None
    text: str = ""
    removed_text: str = ""
    added_text: str = ""

    def runs(self) -> list[tuple[DiffType, str]]:
        """Return the ``(diff_type, text)`` runs of this section in order."""
        if self.kind == SectionKind.MODIFIED:
            return [
                (DiffType.REMOVED, self.removed_text),
                (DiffType.ADDED, self.added_text),
            ]
        return [(self.kind.diff_type, self.text)]


class SectionMap(Sequence[Section]):
    """Ordered sections plus an id -> index lookup."""

    def __init__(self, sections: Iterable[Section] = ()) -> None:
        self._sections: tuple[Section, ...] = tuple(sections)
        self._index: dict[str, int] = {
            s.id: i for i, s in enumerate(self._sections)
        }

    def __getitem__(self, index):  # type: ignore[override]
        return self._sections[index]

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self) -> Iterator[Section]:
        return iter(self._sections)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SectionMap):
            return self._sections == other._sections
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._sections)

    def get(self, sid: str) -> Section | None:
        """Look up a section by ID, returning ``None`` if unknown."""
        idx = self._index.get(sid)
        if idx is None:
            return None
        return self._sections[idx]

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._index
        return item in self._sections

    def has_changes(self) -> bool:
        return any(s.kind != SectionKind.CONTEXT for s in self._sections)


class SectionReconciler:
    """Stateless reconciler: ``DiffOp`` list -> :class:`SectionMap`."""

    @staticmethod
    def reconcile(ops: Sequence[DiffOp]) -> SectionMap:
        """Group *ops* into sections and assign new-document start lines.

        The new-line cursor starts at 1 and advances by the line count of
        every equal or inserted run.  Deleted runs do not move it.
        """
        sections: list[Section] = []
        new_line = 1
        i = 0
        while i < len(ops):
            op = ops[i]
            idx = len(sections)
            if (
                op.kind == DiffOpKind.DELETE
                and i + 1 < len(ops)
                and ops[i + 1].kind == DiffOpKind.INSERT
            ):
                inserted = ops[i + 1]
                sections.append(
                    Section(
                        id=section_id(idx),
                        index=idx,
                        kind=SectionKind.MODIFIED,
                        new_start_line=new_line,
                        removed_text=op.text,
                        added_text=inserted.text,
                    )
                )
                new_line += count_lines(inserted.text)
                i += 2
                continue

            kind = SectionKind.from_diff_type(DiffType.from_op_kind(op.kind))
            removed = kind == SectionKind.REMOVED
            sections.append(
                Section(
                    id=section_id(idx),
                    index=idx,
                    kind=kind,
                    new_start_line=None if removed else new_line,
                    text=op.text,
                )
            )
            if not removed:
                new_line += count_lines(op.text)
            i += 1
        return SectionMap(sections)


@dataclass(frozen=True)
class FlatLine:
    """A single line of section content.

    ``section_local_offset`` is the 0-based position of the line within
    its section's run of the same diff type.
    """

    text: str
    diff_type: DiffType
    section_id: str
    section_local_offset: int


def flatten_sections(sections: Iterable[Section]) -> list[FlatLine]:
    """Expand *sections* into individually tagged lines.

    Offsets restart at 0 for every (section, diff type) run, so the
    removed and added halves of a modified section are numbered
    independently.
    """
    lines: list[FlatLine] = []
    for section in sections:
        for diff_type, text in section.runs():
            for offset, line in enumerate(split_lines(text)):
                lines.append(FlatLine(line, diff_type, section.id, offset))
    return lines

"""Unified and split arrangements of the structured view.

The unified layout walks render blocks and presents the removed and added
halves of a modified section as one unit.  The split layout is built
from sections instead: each section becomes one row with an old-side
panel and a new-side panel, and a section that exists on one side only
leaves a spacer (``None``) on the other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from plan_review.diff.line_differ import split_lines
from plan_review.diff.sections import Section
from plan_review.diff.types import DiffType, SectionKind
from plan_review.render.blocks import CodeBlock, MarkdownBlock, RenderBlock


# ------------------------------------------------------------------
# Unified layout
# ------------------------------------------------------------------


@dataclass(frozen=True)
class BlockGroup:
    """One unit of the unified layout.

    ``kind`` is ``MODIFIED`` for a removed markdown block directly followed
    by the added markdown block of the same section.  A lone block takes
    the section kind matching its diff type (the fence line's diff type
    for code blocks).
    """

    kind: SectionKind
    blocks: tuple[RenderBlock, ...]

    @property
    def is_modified_pair(self) -> bool:
        return self.kind == SectionKind.MODIFIED

    @property
    def section_id(self) -> str:
        first = self.blocks[0]
        if isinstance(first, CodeBlock):
            return first.fence_section_id
        return first.section_id


def _is_modified_pair(block: RenderBlock, following: RenderBlock | None) -> bool:
    return (
        isinstance(block, MarkdownBlock)
        and block.diff_type == DiffType.REMOVED
        and isinstance(following, MarkdownBlock)
        and following.diff_type == DiffType.ADDED
        and following.section_id == block.section_id
    )


def group_blocks(blocks: Sequence[RenderBlock]) -> list[BlockGroup]:
    """Group *blocks* for the unified layout, preserving their order."""
    groups: list[BlockGroup] = []
    i = 0
    while i < len(blocks):
        block = blocks[i]
        following = blocks[i + 1] if i + 1 < len(blocks) else None
        if _is_modified_pair(block, following):
            groups.append(BlockGroup(SectionKind.MODIFIED, (block, following)))
            i += 2
            continue
        diff_type = block.fence_diff_type if isinstance(block, CodeBlock) else block.diff_type
        groups.append(BlockGroup(SectionKind.from_diff_type(diff_type), (block,)))
        i += 1
    return groups


# ------------------------------------------------------------------
# Split layout
# ------------------------------------------------------------------


@dataclass(frozen=True)
class SectionPanel:
    """The content one section shows on one side of the split layout.

    Panel lines are numbered from the start of the section run, so the
    section-local offset of every panel is 0.
    """

    section_id: str
    diff_type: DiffType
    lines: tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class PanelRow:
    """A section laid out side by side; ``None`` marks a spacer."""

    section_id: str
    kind: SectionKind
    left: SectionPanel | None
    right: SectionPanel | None


def split_section_panels(sections: Iterable[Section]) -> list[PanelRow]:
    """Lay out *sections* as old-side / new-side panel rows.

    Context sections appear on both sides, added sections only on the
    right, removed sections only on the left.  A modified section shows
    its removed text on the left and its added text on the right.
    """
    rows: list[PanelRow] = []
    for section in sections:
        left: SectionPanel | None = None
        right: SectionPanel | None = None
        for diff_type, text in section.runs():
            panel = SectionPanel(section.id, diff_type, tuple(split_lines(text)))
            if diff_type != DiffType.ADDED:
                left = panel
            if diff_type != DiffType.REMOVED:
                right = panel
        rows.append(PanelRow(section.id, section.kind, left, right))
    return rows

"""Mapping rendered content back to absolute new-document lines.

Both display paths funnel through :class:`AddressResolver`, which makes
it the single definition of "the same line" across the raw-text and
structured views.  Comment keys are derived from the resolved address
with :func:`new_line_key`, so a comment made in one view is found again
in the other.
"""

from __future__ import annotations

from plan_review.diff.sections import SectionMap
from plan_review.diff.types import DiffType
from plan_review.render.blocks import CodeLine, MarkdownBlock
from plan_review.render.layout import SectionPanel

NEW_KEY_PREFIX = "new:"
OLD_KEY_PREFIX = "old:"


def new_line_key(line_no: int) -> str:
    """Comment key for an absolute new-document line."""
    return f"{NEW_KEY_PREFIX}{line_no}"


def old_line_key(line_no: int) -> str:
    """Comment key for a line that exists only in the old document."""
    return f"{OLD_KEY_PREFIX}{line_no}"


def parse_line_key(key: str) -> tuple[str, int] | None:
    """Split a comment key into ``(side, line_no)``.

    Returns ``None`` for keys that are not ``old:N`` / ``new:N``.
    """
    side, sep, raw = key.partition(":")
    if not sep or side not in ("old", "new") or not raw.isdigit():
        return None
    return side, int(raw)


class AddressResolver:
    """Resolves leaf positions to 1-based new-document line numbers.

    Args:
        section_map: Sections of the current diff run.
    """

    def __init__(self, section_map: SectionMap) -> None:
        self._sections = section_map

    def resolve(
        self,
        source_line: int,
        section_id: str,
        diff_type: DiffType,
        section_local_offset: int,
    ) -> int | None:
        """Return the absolute line for a leaf, or ``None``.

        Args:
            source_line: 1-based line reported by the renderer, relative
                to the text of the enclosing block.
            section_id: ID of the block's section.
            diff_type: Diff type of the block.
            section_local_offset: Offset of the block's first line within
                its section run.

        Returns:
            ``None`` for removed content and for sections without a
            position in the new document.
        """
        if diff_type == DiffType.REMOVED:
            return None
        section = self._sections.get(section_id)
        if section is None or section.new_start_line is None:
            return None
        return section.new_start_line + section_local_offset + source_line - 1

    def resolve_markdown_leaf(self, block: MarkdownBlock, source_line: int) -> int | None:
        return self.resolve(
            source_line, block.section_id, block.diff_type, block.section_local_offset
        )

    @staticmethod
    def resolve_code_line(line: CodeLine) -> int | None:
        # Precomputed by the block builder; removed lines carry None.
        if line.diff_type == DiffType.REMOVED:
            return None
        return line.new_line

    def resolve_panel_line(self, panel: SectionPanel, source_line: int) -> int | None:
        """Resolve a line of a split-layout panel (offset 0 in its section)."""
        return self.resolve(source_line, panel.section_id, panel.diff_type, 0)

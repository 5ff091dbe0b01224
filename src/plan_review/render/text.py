"""Plain-text rendering of hunks and render blocks for terminals."""

from __future__ import annotations

from itertools import zip_longest
from typing import Iterable, Sequence

from plan_review.diff.hunks import DiffLine, Hunk, pair_split_rows
from plan_review.diff.types import DiffType
from plan_review.render.blocks import CodeBlock, RenderBlock
from plan_review.render.layout import PanelRow, SectionPanel, group_blocks

_MARKERS = {
    DiffType.CONTEXT: " ",
    DiffType.ADDED: "+",
    DiffType.REMOVED: "-",
}


def no_changes_message(old_label: str, new_label: str) -> str:
    return f"No changes between {old_label} and {new_label}"


def _gap(count: int) -> str:
    return f"{count} lines hidden"


def _num(value: int | None, width: int) -> str:
    return ("" if value is None else str(value)).rjust(width)


def format_unified(hunks: Sequence[Hunk]) -> str:
    """Render *hunks* as a unified listing with old/new line gutters."""
    out: list[str] = []
    for i, hunk in enumerate(hunks):
        if i == 0 and hunk.gap_before:
            out.append(_gap(hunk.gap_before))
        out.append(hunk.header)
        for line in hunk.lines:
            out.append(
                f"{_num(line.old_line_no, 4)} {_num(line.new_line_no, 4)} "
                f"{line.prefix}{line.text}"
            )
        if hunk.gap_after:
            out.append(_gap(hunk.gap_after))
    return "\n".join(out)


def _split_cell(line: DiffLine | None, line_no: int | None, width: int) -> str:
    if line is None:
        return " " * width
    cell = f"{_num(line_no, 4)} {line.prefix}{line.text}"
    if len(cell) > width:
        cell = cell[: width - 1] + "…"
    return cell.ljust(width)


def format_split(hunks: Sequence[Hunk], width: int = 60) -> str:
    """Render *hunks* as two side-by-side columns of *width* characters."""
    out: list[str] = []
    for i, hunk in enumerate(hunks):
        if i == 0 and hunk.gap_before:
            out.append(_gap(hunk.gap_before))
        out.append(hunk.header)
        for row in pair_split_rows(hunk):
            left = _split_cell(row.left, row.left.old_line_no if row.left else None, width)
            right = _split_cell(row.right, row.right.new_line_no if row.right else None, width)
            out.append(f"{left} | {right}".rstrip())
        if hunk.gap_after:
            out.append(_gap(hunk.gap_after))
    return "\n".join(out)


def format_blocks(blocks: Iterable[RenderBlock], addresses: Sequence[Sequence[int | None]]) -> str:
    """Render the unified structured view, one output line per content line.

    A removed block followed by the added block of the same section is
    introduced by a ``[modified @ section]`` line.

    Args:
        blocks: Render blocks in order.
        addresses: For each block, the resolved new-document line of each
            of its content lines (``None`` for removed lines).
    """
    blocks = list(blocks)
    out: list[str] = []
    pos = 0
    for group in group_blocks(blocks):
        if group.is_modified_pair:
            out.append(f"[{group.kind.value} @ {group.section_id}]")
        for block in group.blocks:
            if isinstance(block, CodeBlock):
                out.append(f"[code {block.language or '-'} @ {block.fence_section_id}]")
                entries = [(line.diff_type, line.text) for line in block.lines]
            else:
                out.append(f"[{block.diff_type.value} @ {block.section_id}]")
                entries = [(block.diff_type, text) for text in block.lines]
            for (diff_type, text), address in zip(entries, addresses[pos]):
                out.append(f"{_num(address, 4)} {_MARKERS[diff_type]} {text}")
            pos += 1
    return "\n".join(out)


def _panel_cells(
    panel: SectionPanel | None, addresses: Sequence[int | None] | None
) -> list[str]:
    if panel is None:
        return []
    marker = _MARKERS[panel.diff_type]
    if addresses is None:
        return [f"{marker} {text}" for text in panel.lines]
    return [
        f"{_num(address, 4)} {marker} {text}"
        for text, address in zip(panel.lines, addresses)
    ]


def format_split_panels(
    rows: Iterable[PanelRow],
    addresses: Sequence[Sequence[int | None] | None],
    width: int = 60,
) -> str:
    """Render the split structured view: old panels left, new panels right.

    A section present on one side only leaves a blank spacer column on
    the other.

    Args:
        rows: Panel rows in section order.
        addresses: For each row, the resolved new-document lines of its
            right-hand panel (``None`` when the row has no right panel).
        width: Column width in characters.
    """
    out: list[str] = []
    for row, right_addresses in zip(rows, addresses):
        out.append(f"[{row.kind.value} @ {row.section_id}]")
        left = _panel_cells(row.left, None)
        right = _panel_cells(row.right, right_addresses)
        for left_cell, right_cell in zip_longest(left, right, fillvalue=""):
            if len(left_cell) > width:
                left_cell = left_cell[: width - 1] + "…"
            out.append(f"{left_cell.ljust(width)} | {right_cell}".rstrip())
    return "\n".join(out)

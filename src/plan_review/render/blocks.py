"""Group flattened diff lines into render blocks.

Prose is handed to the markdown renderer in :class:`MarkdownBlock` units
that share a diff type and section.  A fenced code region is always one
:class:`CodeBlock`, even when the diff splits it across several
sections, so the renderer never sees half a fence.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any, Iterable, Union

from plan_review.diff.sections import FlatLine, SectionMap
from plan_review.diff.types import DiffType

_FENCE_OPEN_RE = re.compile(r"^(`{3,}|~{3,})(.*)$")


def _is_fence_close(trimmed: str, fence: str) -> bool:
    """Return ``True`` if *trimmed* closes a fence opened with *fence*."""
    run = len(trimmed) - len(trimmed.lstrip(fence[0]))
    return run >= len(fence) and not trimmed[run:].strip()


@dataclass(frozen=True)
class MarkdownBlock:
    """Consecutive prose lines sharing ``(diff_type, section_id)``."""

    diff_type: DiffType
    section_id: str
    section_local_offset: int
    lines: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class CodeLine:
    """A content line of a fenced code region.

    ``new_line`` is the absolute new-document line, or ``None`` for
    removed lines and lines whose section has no new-document position.
    """

    text: str
    diff_type: DiffType
    section_id: str
    new_line: int | None


@dataclass(frozen=True)
class CodeBlock:
    """A complete fenced code region; fence lines are not stored."""

    fence_diff_type: DiffType
    fence_section_id: str
    fence_local_offset: int
    language: str = ""
    lines: tuple[CodeLine, ...] = ()

    @property
    def has_changes(self) -> bool:
        return any(line.diff_type != DiffType.CONTEXT for line in self.lines)


RenderBlock = Union[MarkdownBlock, CodeBlock]


class BlockBuilder:
    """Builds render blocks from flat lines in a single pass.

    Args:
        section_map: Sections the flat lines were produced from, used to
            compute absolute line numbers for code lines.
    """

    def __init__(self, section_map: SectionMap) -> None:
        self._sections = section_map

    def build(self, flat_lines: Iterable[FlatLine]) -> list[RenderBlock]:
        blocks: list[RenderBlock] = []
        head: RenderBlock | None = None
        pending: list[Any] = []
        in_code = False
        fence = "```"

        def flush() -> None:
            nonlocal head
            if head is not None:
                blocks.append(replace(head, lines=tuple(pending)))
            head = None
            pending.clear()

        for line in flat_lines:
            trimmed = line.text.strip()

            if not in_code:
                match = _FENCE_OPEN_RE.match(trimmed)
                if match:
                    flush()
                    in_code = True
                    fence = match.group(1)
                    head = CodeBlock(
                        fence_diff_type=line.diff_type,
                        fence_section_id=line.section_id,
                        fence_local_offset=line.section_local_offset + 1,
                        language=match.group(2).strip(),
                    )
                    continue

                if not (
                    isinstance(head, MarkdownBlock)
                    and head.diff_type == line.diff_type
                    and head.section_id == line.section_id
                ):
                    flush()
                    head = MarkdownBlock(
                        diff_type=line.diff_type,
                        section_id=line.section_id,
                        section_local_offset=line.section_local_offset,
                    )
                pending.append(line.text)
                continue

            if _is_fence_close(trimmed, fence):
                in_code = False
                flush()
                continue

            pending.append(
                CodeLine(
                    text=line.text,
                    diff_type=line.diff_type,
                    section_id=line.section_id,
                    new_line=self._new_line(line),
                )
            )

        # An unterminated fence runs to the end of the document.
        flush()
        return blocks

    def _new_line(self, line: FlatLine) -> int | None:
        if line.diff_type == DiffType.REMOVED:
            return None
        section = self._sections.get(line.section_id)
        if section is None or section.new_start_line is None:
            return None
        return section.new_start_line + line.section_local_offset


def has_changes(blocks: Iterable[RenderBlock]) -> bool:
    """Return ``True`` if any block carries non-context content."""
    for block in blocks:
        if isinstance(block, CodeBlock):
            if block.has_changes:
                return True
        elif block.diff_type != DiffType.CONTEXT:
            return True
    return False

"""Review session orchestrator.

Ties the diff pipeline, the structured renderer, address resolution and
the comment store together for one (old, new) document pair at a time.
Everything derived from the pair is recomputed only when the pair
changes, and a change of pair always empties the comment store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from plan_review.comments.address import AddressResolver, new_line_key, old_line_key
from plan_review.comments.store import Comment, CommentStore
from plan_review.config import Settings
from plan_review.config import settings as default_settings
from plan_review.diff.hunks import DiffLine, Hunk, HunkBuilder, SplitRow, diff_lines, pair_split_rows
from plan_review.diff.line_differ import DiffOp, LineDiffer, normalize_newlines, split_lines
from plan_review.diff.sections import FlatLine, SectionMap, SectionReconciler, flatten_sections
from plan_review.diff.types import DiffType
from plan_review.render.blocks import BlockBuilder, CodeBlock, MarkdownBlock, RenderBlock
from plan_review.render.layout import (
    BlockGroup,
    PanelRow,
    SectionPanel,
    group_blocks,
    split_section_panels,
)
from plan_review.render.markdown import MarkdownLeafRenderer, TaggedNode

logger = logging.getLogger(__name__)

CODE_LINE_TAG = "code-line"


# ------------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------------


@dataclass(frozen=True)
class ReviewPipeline:
    """Everything derived from one document pair."""

    ops: tuple[DiffOp, ...]
    rows: tuple[DiffLine, ...]
    sections: SectionMap
    flat_lines: tuple[FlatLine, ...]
    blocks: tuple[RenderBlock, ...]
    groups: tuple[BlockGroup, ...]
    panels: tuple[PanelRow, ...]


@lru_cache(maxsize=32)
def build_pipeline(old_content: str, new_content: str) -> ReviewPipeline:
    """Run the diff pipeline for a document pair (memoized)."""
    ops = LineDiffer.diff(old_content, new_content)
    sections = SectionReconciler.reconcile(ops)
    flat = flatten_sections(sections)
    blocks = BlockBuilder(sections).build(flat)
    return ReviewPipeline(
        ops=tuple(ops),
        rows=tuple(diff_lines(ops)),
        sections=sections,
        flat_lines=tuple(flat),
        blocks=tuple(blocks),
        groups=tuple(group_blocks(blocks)),
        panels=tuple(split_section_panels(sections)),
    )


@dataclass(frozen=True)
class AnnotatedLeaf:
    """A rendered leaf and the new-document line it resolves to."""

    node: TaggedNode
    address: int | None


# ------------------------------------------------------------------
# Session
# ------------------------------------------------------------------


class ReviewSession:
    """Interactive review of one document pair.

    Args:
        settings: Settings providing the default context window and
            prompt header.  Defaults to the environment-derived settings.
        renderer: Structured renderer used for :meth:`leaves`.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        renderer: MarkdownLeafRenderer | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._renderer = renderer or MarkdownLeafRenderer()
        self._comments = CommentStore(prompt_header=self._settings.prompt_header)
        self._old = ""
        self._new = ""
        self._comments.track_documents(self._old, self._new)
        self._apply_pipeline()

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def load(self, old_content: str | None, new_content: str | None) -> bool:
        """Switch to a document pair.

        ``None`` is treated as an empty document and line endings are
        normalized to ``\\n``.  Comments made against a different pair
        are discarded.

        Returns:
            ``True`` if the pair changed.
        """
        old = normalize_newlines(old_content or "")
        new = normalize_newlines(new_content or "")
        changed = self._comments.track_documents(old, new)
        if changed:
            self._old = old
            self._new = new
            self._apply_pipeline()
        return changed

    def _apply_pipeline(self) -> None:
        self._pipeline = build_pipeline(self._old, self._new)
        self._resolver = AddressResolver(self._pipeline.sections)
        self._old_lines = split_lines(self._old)
        self._new_lines = split_lines(self._new)

        # Old line -> (its row, sort key among new-document lines).
        self._old_rows: dict[int, tuple[DiffLine, int]] = {}
        cursor = 1
        for row in self._pipeline.rows:
            if row.new_line_no is not None:
                cursor = row.new_line_no + 1
            if row.old_line_no is not None:
                sort_key = row.new_line_no if row.new_line_no is not None else cursor
                self._old_rows[row.old_line_no] = (row, sort_key)

        logger.debug(
            "Review pipeline: %d op(s), %d section(s), %d block(s)",
            len(self._pipeline.ops),
            len(self._pipeline.sections),
            len(self._pipeline.blocks),
        )

    @property
    def old_content(self) -> str:
        return self._old

    @property
    def new_content(self) -> str:
        return self._new

    @property
    def ops(self) -> tuple[DiffOp, ...]:
        return self._pipeline.ops

    @property
    def sections(self) -> SectionMap:
        return self._pipeline.sections

    @property
    def flat_lines(self) -> tuple[FlatLine, ...]:
        return self._pipeline.flat_lines

    @property
    def blocks(self) -> tuple[RenderBlock, ...]:
        return self._pipeline.blocks

    @property
    def block_groups(self) -> tuple[BlockGroup, ...]:
        """Blocks grouped for the unified structured layout."""
        return self._pipeline.groups

    @property
    def panel_rows(self) -> tuple[PanelRow, ...]:
        """Sections laid out for the split structured layout."""
        return self._pipeline.panels

    @property
    def resolver(self) -> AddressResolver:
        return self._resolver

    @property
    def comments(self) -> CommentStore:
        return self._comments

    @property
    def has_changes(self) -> bool:
        return LineDiffer.has_changes(self._pipeline.ops)

    # ------------------------------------------------------------------
    # Raw-text view
    # ------------------------------------------------------------------

    def hunks(self, context_lines: int | None = None) -> list[Hunk]:
        if context_lines is None:
            context_lines = self._settings.context_lines
        return HunkBuilder(context_lines).build(self._pipeline.ops)

    @staticmethod
    def split_rows(hunk: Hunk) -> list[SplitRow]:
        return pair_split_rows(hunk)

    # ------------------------------------------------------------------
    # Structured view
    # ------------------------------------------------------------------

    def leaves(self, block: RenderBlock, *, comment_mode: bool = True) -> list[AnnotatedLeaf]:
        """Render *block* and resolve every leaf to a new-document line.

        Removed content, and everything when *comment_mode* is off, is
        rendered without source lines and therefore without addresses.
        Code blocks yield one leaf per content line.
        """
        if isinstance(block, CodeBlock):
            leaves: list[AnnotatedLeaf] = []
            for i, line in enumerate(block.lines):
                annotate = comment_mode and line.diff_type != DiffType.REMOVED
                node = TaggedNode(CODE_LINE_TAG, i + 1 if annotate else None, line.text)
                address = self._resolver.resolve_code_line(line) if annotate else None
                leaves.append(AnnotatedLeaf(node, address))
            return leaves

        annotate = comment_mode and block.diff_type != DiffType.REMOVED
        result: list[AnnotatedLeaf] = []
        for node in self._renderer.render(block.text, annotate=annotate):
            address = None
            if node.source_line is not None:
                address = self._resolver.resolve_markdown_leaf(block, node.source_line)
            result.append(AnnotatedLeaf(node, address))
        return result

    def line_addresses(self, block: RenderBlock) -> list[int | None]:
        """Return the new-document line of each content line of *block*."""
        if isinstance(block, CodeBlock):
            return [self._resolver.resolve_code_line(line) for line in block.lines]
        return [
            self._resolver.resolve_markdown_leaf(block, i + 1)
            for i in range(len(block.lines))
        ]

    def panel_leaves(
        self, panel: SectionPanel, *, comment_mode: bool = True
    ) -> list[AnnotatedLeaf]:
        """Render a split-layout panel; removed panels carry no addresses."""
        annotate = comment_mode and panel.diff_type != DiffType.REMOVED
        result: list[AnnotatedLeaf] = []
        for node in self._renderer.render(panel.text, annotate=annotate):
            address = None
            if node.source_line is not None:
                address = self._resolver.resolve_panel_line(panel, node.source_line)
            result.append(AnnotatedLeaf(node, address))
        return result

    def panel_line_addresses(self, panel: SectionPanel) -> list[int | None]:
        return [
            self._resolver.resolve_panel_line(panel, i + 1)
            for i in range(len(panel.lines))
        ]

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def comment_on_address(self, address: int | None, text: str) -> Comment | None:
        """Comment on an absolute new-document line.

        Returns:
            The stored comment, or ``None`` when *address* is ``None`` or
            *text* is blank.

        Raises:
            KeyError: If *address* is outside the new document.
        """
        if address is None or not text.strip():
            return None
        line_text = self._new_line_text(address)
        return self._comments.add(
            key=new_line_key(address),
            source_line_text=line_text,
            comment_text=text.strip(),
            display_label=f"Line {address}",
            sort_key=address,
        )

    def comment_on_leaf(
        self, block: RenderBlock, source_line: int, text: str
    ) -> Comment | None:
        """Comment on a leaf identified by its block-local source line."""
        return self.comment_on_address(self._resolve_leaf(block, source_line), text)

    def comment_on_panel(
        self, panel: SectionPanel, source_line: int, text: str
    ) -> Comment | None:
        """Comment on a leaf of a split-layout panel."""
        if not 1 <= source_line <= len(panel.lines):
            return None
        return self.comment_on_address(
            self._resolver.resolve_panel_line(panel, source_line), text
        )

    def comment_on_raw_line(self, side: str, line_no: int, text: str) -> Comment | None:
        """Comment on a row of the raw-text view.

        Args:
            side: ``"new"`` for a new-document line number, ``"old"`` for
                an old-document line number.  Old lines that still exist
                in the new document are stored under their new address.
            line_no: 1-based line number on *side*.
            text: Comment text.

        Raises:
            KeyError: If the line does not exist.
            ValueError: If *side* is not ``"old"`` or ``"new"``.
        """
        if side == "new":
            return self.comment_on_address(line_no, text)
        if side != "old":
            raise ValueError(f"side must be 'old' or 'new', got {side!r}")

        entry = self._old_rows.get(line_no)
        if entry is None:
            raise KeyError(f"No line {line_no} in old document")
        row, sort_key = entry
        if row.new_line_no is not None:
            return self.comment_on_address(row.new_line_no, text)
        if not text.strip():
            return None
        return self._comments.add(
            key=old_line_key(line_no),
            source_line_text=row.text,
            comment_text=text.strip(),
            display_label=f"Removed line {line_no}",
            sort_key=sort_key,
        )

    def toggle_comment(self, address: int | None, text: str = "") -> Comment | None:
        """Remove the comment at *address* if present, else add one.

        Mirrors clicking a line: a commented line loses its comment.
        """
        if address is None:
            return None
        key = new_line_key(address)
        if key in self._comments:
            self._comments.remove(key)
            return None
        return self.comment_on_address(address, text)

    def remove_comment(self, key: str) -> None:
        self._comments.remove(key)

    def clear_comments(self) -> None:
        self._comments.clear()

    def comment_prompt(self) -> str:
        return self._comments.serialize()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_leaf(self, block: RenderBlock, source_line: int) -> int | None:
        if not 1 <= source_line <= len(block.lines):
            return None
        if isinstance(block, MarkdownBlock):
            return self._resolver.resolve_markdown_leaf(block, source_line)
        return self._resolver.resolve_code_line(block.lines[source_line - 1])

    def _new_line_text(self, line_no: int) -> str:
        if not 1 <= line_no <= len(self._new_lines):
            raise KeyError(f"No line {line_no} in new document")
        return self._new_lines[line_no - 1]

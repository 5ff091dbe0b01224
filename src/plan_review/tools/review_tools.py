"""MCP tools for diffing document revisions and collecting comments."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from plan_review.diff.hunks import DiffLine, Hunk
from plan_review.diff.types import ViewMode
from plan_review.render.blocks import CodeBlock, RenderBlock
from plan_review.render.layout import SectionPanel
from plan_review.session import AnnotatedLeaf, ReviewSession
from plan_review.tools.schemas import (
    CommentResponse,
    DiffLineResponse,
    HunkResponse,
    LeafResponse,
    LoadResponse,
    PanelResponse,
    PanelRowResponse,
    RenderBlockResponse,
)


def _line_response(line: DiffLine | None) -> DiffLineResponse | None:
    if line is None:
        return None
    return DiffLineResponse(
        diff_type=line.diff_type.value,
        text=line.text,
        old_line_no=line.old_line_no,
        new_line_no=line.new_line_no,
    )


def _hunk_response(hunk: Hunk, view_mode: ViewMode) -> HunkResponse:
    lines: list[DiffLineResponse] = []
    rows: list[list[DiffLineResponse | None]] = []
    if view_mode == ViewMode.SPLIT:
        rows = [
            [_line_response(row.left), _line_response(row.right)]
            for row in ReviewSession.split_rows(hunk)
        ]
    else:
        lines = [_line_response(line) for line in hunk.lines]
    return HunkResponse(
        header=hunk.header,
        gap_before=hunk.gap_before,
        gap_after=hunk.gap_after,
        lines=lines,
        rows=rows,
    )


def _leaf_responses(leaves: list[AnnotatedLeaf]) -> list[LeafResponse]:
    return [
        LeafResponse(
            tag=leaf.node.tag,
            source_line=leaf.node.source_line,
            address=leaf.address,
            content=leaf.node.content,
        )
        for leaf in leaves
    ]


def _block_response(
    session: ReviewSession,
    index: int,
    block: RenderBlock,
    comment_mode: bool,
    group_index: int,
    modified_pair: bool,
) -> RenderBlockResponse:
    leaves = _leaf_responses(session.leaves(block, comment_mode=comment_mode))
    if isinstance(block, CodeBlock):
        return RenderBlockResponse(
            index=index,
            block_type="code",
            diff_type=block.fence_diff_type.value,
            section_id=block.fence_section_id,
            language=block.language,
            lines=[line.text for line in block.lines],
            line_addresses=session.line_addresses(block),
            leaves=leaves,
            group_index=group_index,
            modified_pair=modified_pair,
        )
    return RenderBlockResponse(
        index=index,
        block_type="markdown",
        diff_type=block.diff_type.value,
        section_id=block.section_id,
        lines=list(block.lines),
        line_addresses=session.line_addresses(block),
        leaves=leaves,
        group_index=group_index,
        modified_pair=modified_pair,
    )


def _unified_block_responses(
    session: ReviewSession, comment_mode: bool
) -> list[dict[str, Any]]:
    responses: list[dict[str, Any]] = []
    for group_index, group in enumerate(session.block_groups):
        for block in group.blocks:
            responses.append(
                _block_response(
                    session,
                    len(responses),
                    block,
                    comment_mode,
                    group_index,
                    group.is_modified_pair,
                ).model_dump()
            )
    return responses


def _panel_response(
    session: ReviewSession, panel: SectionPanel | None, comment_mode: bool
) -> PanelResponse | None:
    if panel is None:
        return None
    return PanelResponse(
        diff_type=panel.diff_type.value,
        lines=list(panel.lines),
        line_addresses=session.panel_line_addresses(panel),
        leaves=_leaf_responses(session.panel_leaves(panel, comment_mode=comment_mode)),
    )


def _split_panel_responses(
    session: ReviewSession, comment_mode: bool
) -> list[dict[str, Any]]:
    return [
        PanelRowResponse(
            section_id=row.section_id,
            kind=row.kind.value,
            left=_panel_response(session, row.left, comment_mode),
            right=_panel_response(session, row.right, comment_mode),
        ).model_dump()
        for row in session.panel_rows
    ]


def _comment_response(session: ReviewSession) -> list[dict[str, Any]]:
    return [
        CommentResponse(**c.model_dump()).model_dump()
        for c in session.comments.iter_sorted()
    ]


def register_review_tools(mcp: FastMCP, session: ReviewSession) -> None:
    """Register diff and comment tools with the MCP server."""

    @mcp.tool()
    def load_documents(old_content: str, new_content: str) -> dict[str, Any]:
        """Load an old and a new revision of a document for review.

        Loading a different pair discards every existing comment, since
        comment anchors are only valid for one pair.

        Args:
            old_content: Previous revision text.
            new_content: Current revision text.
        """
        changed = session.load(old_content, new_content)
        return LoadResponse(
            changed=changed,
            has_changes=session.has_changes,
            section_count=len(session.sections),
            block_count=len(session.blocks),
            comment_count=len(session.comments),
        ).model_dump()

    @mcp.tool()
    def get_diff_hunks(
        context_lines: int | None = None,
        view_mode: str = ViewMode.UNIFIED.value,
    ) -> list[dict[str, Any]]:
        """Return the raw line diff as context-padded hunks.

        An empty list means there are no changes.

        Args:
            context_lines: Unchanged lines around each change (default 3).
            view_mode: 'unified' for a line list, 'split' for paired rows.
        """
        mode = ViewMode(view_mode)
        return [
            _hunk_response(h, mode).model_dump()
            for h in session.hunks(context_lines)
        ]

    @mcp.tool()
    def get_render_blocks(
        comment_mode: bool = True,
        view_mode: str = ViewMode.UNIFIED.value,
    ) -> list[dict[str, Any]]:
        """Return the structured (markdown) view.

        In 'unified' mode the result is a list of render blocks; the
        removed and added blocks of a modified section share a
        group_index and have modified_pair set.  In 'split' mode it is one
        row per section with a left (old) and right (new) panel; a side
        the section does not exist on is null.  Leaves carry the
        new-document line they resolve to; removed content has no address.

        Args:
            comment_mode: When False, leaves carry no source lines.
            view_mode: 'unified' or 'split'.
        """
        if ViewMode(view_mode) == ViewMode.SPLIT:
            return _split_panel_responses(session, comment_mode)
        return _unified_block_responses(session, comment_mode)

    @mcp.tool()
    def add_line_comment(line: int, comment: str) -> dict[str, Any] | None:
        """Comment on a line of the new revision.

        Args:
            line: 1-based line number in the new revision.
            comment: Comment text.
        """
        stored = session.comment_on_address(line, comment)
        return stored.model_dump() if stored else None

    @mcp.tool()
    def add_removed_line_comment(line: int, comment: str) -> dict[str, Any] | None:
        """Comment on a line of the old revision.

        Lines that survive into the new revision are anchored to their
        new line number.

        Args:
            line: 1-based line number in the old revision.
            comment: Comment text.
        """
        stored = session.comment_on_raw_line("old", line, comment)
        return stored.model_dump() if stored else None

    @mcp.tool()
    def remove_comment(key: str) -> list[dict[str, Any]]:
        """Remove a comment by key (e.g. 'new:12' or 'old:4').

        Args:
            key: Comment key as returned by list_comments.
        """
        session.remove_comment(key)
        return _comment_response(session)

    @mcp.tool()
    def clear_comments() -> list[dict[str, Any]]:
        """Remove all comments."""
        session.clear_comments()
        return _comment_response(session)

    @mcp.tool()
    def list_comments() -> list[dict[str, Any]]:
        """List comments ordered by line."""
        return _comment_response(session)

    @mcp.tool()
    def get_comment_prompt() -> str:
        """Return all comments serialized as a single prompt."""
        return session.comment_prompt()

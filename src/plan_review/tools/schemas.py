"""Pydantic models for MCP tool outputs."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoadResponse(BaseModel):
    """Response for loading a document pair."""

    changed: bool
    has_changes: bool
    section_count: int
    block_count: int
    comment_count: int


class DiffLineResponse(BaseModel):
    """Single row of a raw-text hunk."""

    diff_type: str  # context | added | removed
    text: str
    old_line_no: int | None = None
    new_line_no: int | None = None


class HunkResponse(BaseModel):
    """A hunk in unified or split layout."""

    header: str
    gap_before: int = 0
    gap_after: int = 0
    lines: list[DiffLineResponse] = Field(default_factory=list)
    # Split layout only: [left, right] pairs, None for padding cells.
    rows: list[list[DiffLineResponse | None]] = Field(default_factory=list)


class LeafResponse(BaseModel):
    """A rendered leaf with its resolved new-document line."""

    tag: str
    source_line: int | None = None
    address: int | None = None
    content: str = ""


class RenderBlockResponse(BaseModel):
    """A markdown or code render block."""

    index: int
    block_type: str  # markdown | code
    diff_type: str
    section_id: str
    language: str = ""
    lines: list[str] = Field(default_factory=list)
    line_addresses: list[int | None] = Field(default_factory=list)
    leaves: list[LeafResponse] = Field(default_factory=list)
    # Blocks sharing a group index render as one unit; modified_pair marks
    # the removed + added halves of a modified section.
    group_index: int = 0
    modified_pair: bool = False


class PanelResponse(BaseModel):
    """One side of a section in the split structured layout."""

    diff_type: str
    lines: list[str] = Field(default_factory=list)
    line_addresses: list[int | None] = Field(default_factory=list)
    leaves: list[LeafResponse] = Field(default_factory=list)


class PanelRowResponse(BaseModel):
    """A section laid out side by side; a missing side is a spacer."""

    section_id: str
    kind: str  # context | added | removed | modified
    left: PanelResponse | None = None
    right: PanelResponse | None = None


class CommentResponse(BaseModel):
    """A stored comment."""

    key: str
    display_label: str
    source_line_text: str
    comment_text: str
    sort_key: int

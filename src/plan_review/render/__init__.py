"""Render blocks, markdown leaf tagging and plain-text output."""

from plan_review.render.blocks import (
    BlockBuilder,
    CodeBlock,
    CodeLine,
    MarkdownBlock,
    RenderBlock,
    has_changes,
)
from plan_review.render.layout import (
    BlockGroup,
    PanelRow,
    SectionPanel,
    group_blocks,
    split_section_panels,
)
from plan_review.render.markdown import (
    DEFAULT_TAGGERS,
    LeafTagger,
    MarkdownLeafRenderer,
    TaggedNode,
)

__all__ = [
    "DEFAULT_TAGGERS",
    "BlockBuilder",
    "BlockGroup",
    "CodeBlock",
    "CodeLine",
    "LeafTagger",
    "MarkdownBlock",
    "MarkdownLeafRenderer",
    "PanelRow",
    "RenderBlock",
    "SectionPanel",
    "TaggedNode",
    "group_blocks",
    "has_changes",
    "split_section_panels",
]

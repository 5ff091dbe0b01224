"""Structured markdown rendering with source-line tagging.

Uses ``markdown-it-py`` to tokenise a render block's text and emits one
:class:`TaggedNode` per annotatable element.  Each node carries the
1-based line, within the text it was given, on which the element starts.
That line is the only thing the address resolver needs from the
renderer.

Tagging is dispatched through a registry of :class:`LeafTagger` objects
keyed by HTML tag name; tags without an entry are rendered but never
reported as clickable leaves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from markdown_it import MarkdownIt

# Token types whose output element is a <pre> rather than token.tag ("code").
_PRE_TOKEN_TYPES = frozenset({"fence", "code_block"})


@dataclass(frozen=True)
class TaggedNode:
    """A rendered element with its source line (``None`` when untagged)."""

    tag: str
    source_line: int | None
    content: str


class LeafTagger(Protocol):
    """Builds a :class:`TaggedNode` for one kind of element."""

    def tag_leaf(self, source_line: int | None, content: str) -> TaggedNode:
        ...


class AnnotatableTagger:
    """Default tagger: stamps the source line onto the element as-is."""

    def __init__(self, tag: str) -> None:
        self.tag = tag

    def tag_leaf(self, source_line: int | None, content: str) -> TaggedNode:
        return TaggedNode(self.tag, source_line, content)


class RuleTagger:
    """Tagger for ``<hr>``: a void element with no text content."""

    tag = "hr"

    def tag_leaf(self, source_line: int | None, content: str) -> TaggedNode:
        return TaggedNode(self.tag, source_line or None, "")


ANNOTATABLE_TAGS: tuple[str, ...] = (
    "p",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "li",
    "pre",
    "blockquote",
    "table",
    "tr",
)

DEFAULT_TAGGERS: dict[str, LeafTagger] = {
    **{tag: AnnotatableTagger(tag) for tag in ANNOTATABLE_TAGS},
    "hr": RuleTagger(),
}


class MarkdownLeafRenderer:
    """Renders markdown text into tagged leaf nodes.

    Args:
        taggers: Registry of taggers keyed by tag name.  Defaults to
            :data:`DEFAULT_TAGGERS`.
    """

    def __init__(self, taggers: dict[str, LeafTagger] | None = None) -> None:
        self._md = MarkdownIt("commonmark", {"typographer": False})
        self._md.enable("table")
        self._taggers = dict(DEFAULT_TAGGERS if taggers is None else taggers)

    def render(self, markdown_text: str, *, annotate: bool = True) -> list[TaggedNode]:
        """Parse *markdown_text* and return its annotatable elements.

        Args:
            markdown_text: Text of a single render block.
            annotate: When ``False`` every node is returned with
                ``source_line=None`` (used for removed content, which has
                no address in the new document).

        Returns:
            Nodes in document order, outer elements before the elements
            nested inside them.
        """
        tokens = self._md.parse(markdown_text)
        nodes: list[TaggedNode] = []
        for idx, tok in enumerate(tokens):
            if tok.nesting == -1 or tok.type == "inline":
                continue
            tag = "pre" if tok.type in _PRE_TOKEN_TYPES else tok.tag
            tagger = self._taggers.get(tag)
            if tagger is None:
                continue
            line = tok.map[0] + 1 if (annotate and tok.map) else None
            nodes.append(tagger.tag_leaf(line, self._content(tokens, idx)))
        return nodes

    @staticmethod
    def _content(tokens: list[Any], idx: int) -> str:
        """Return the plain text content of the element opened at *idx*."""
        tok = tokens[idx]
        if tok.nesting == 0:
            return tok.content.rstrip("\n") if tok.type in _PRE_TOKEN_TYPES else tok.content
        parts: list[str] = []
        for inner in tokens[idx + 1:]:
            if inner.level <= tok.level:
                break
            if inner.type == "inline" and inner.content:
                parts.append(inner.content)
        return " ".join(parts)

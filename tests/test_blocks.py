"""Unit tests for plan_review.render.blocks."""
from plan_review.diff.line_differ import LineDiffer
from plan_review.diff.sections import SectionReconciler, flatten_sections
from plan_review.diff.types import DiffType
from plan_review.render.blocks import (
    BlockBuilder,
    CodeBlock,
    CodeLine,
    MarkdownBlock,
    has_changes,
)


def _blocks(old: str, new: str):
    sections = SectionReconciler.reconcile(LineDiffer.diff(old, new))
    return BlockBuilder(sections).build(flatten_sections(sections))


# ─── Markdown grouping ────────────────────────────────────────────────────────

def test_title_scenario_blocks():
    blocks = _blocks("# Title\nold line\n", "# Title\nnew line\n")
    assert blocks == [
        MarkdownBlock(DiffType.CONTEXT, "section-0", 0, ("# Title",)),
        MarkdownBlock(DiffType.REMOVED, "section-1", 0, ("old line",)),
        MarkdownBlock(DiffType.ADDED, "section-1", 0, ("new line",)),
    ]
    assert has_changes(blocks)


def test_consecutive_lines_share_one_block():
    blocks = _blocks("a\nb\nc\n", "a\nb\nc\n")
    assert len(blocks) == 1
    assert blocks[0].text == "a\nb\nc"
    assert not has_changes(blocks)


# ─── Fenced code ──────────────────────────────────────────────────────────────

def test_fence_spanning_two_sections_is_one_code_block():
    blocks = _blocks("```\na\n", "```\na\nb\n```\n")
    assert len(blocks) == 1
    block = blocks[0]
    assert isinstance(block, CodeBlock)
    assert block.fence_section_id == "section-0"
    assert block.fence_local_offset == 1
    assert block.lines == (
        CodeLine("a", DiffType.CONTEXT, "section-0", 2),
        CodeLine("b", DiffType.ADDED, "section-1", 3),
    )
    assert block.has_changes


def test_fence_lines_are_not_stored_and_offsets_count_them():
    doc = "intro\n```python\ncode\n```\nafter\n"
    blocks = _blocks(doc, doc)
    assert len(blocks) == 3
    intro, code, after = blocks
    assert intro.lines == ("intro",)
    assert code.language == "python"
    assert code.fence_local_offset == 2
    assert [line.text for line in code.lines] == ["code"]
    assert code.lines[0].new_line == 3
    assert after.section_local_offset == 4


def test_removed_code_line_has_no_new_line():
    blocks = _blocks("```\na\n```\n", "```\nb\n```\n")
    assert len(blocks) == 1
    assert blocks[0].lines == (
        CodeLine("a", DiffType.REMOVED, "section-1", None),
        CodeLine("b", DiffType.ADDED, "section-1", 2),
    )


def test_unterminated_fence_becomes_trailing_code_block():
    doc = "text\n```\ncode\nmore\n"
    blocks = _blocks(doc, doc)
    assert len(blocks) == 2
    assert isinstance(blocks[1], CodeBlock)
    assert [line.text for line in blocks[1].lines] == ["code", "more"]


def test_longer_closing_fence_of_same_char_closes():
    doc = "~~~\nx\n~~~~\nafter\n"
    blocks = _blocks(doc, doc)
    assert [type(b) for b in blocks] == [CodeBlock, MarkdownBlock]
    assert blocks[1].lines == ("after",)


def test_other_fence_char_does_not_close():
    doc = "```\nx\n~~~\ny\n```\n"
    blocks = _blocks(doc, doc)
    assert len(blocks) == 1
    assert [line.text for line in blocks[0].lines] == ["x", "~~~", "y"]


def test_shorter_closing_fence_does_not_close():
    doc = "````\nx\n```\n````\n"
    blocks = _blocks(doc, doc)
    assert len(blocks) == 1
    assert [line.text for line in blocks[0].lines] == ["x", "```"]


def test_indented_fence_is_recognised():
    doc = "  ```\n  x\n  ```\n"
    blocks = _blocks(doc, doc)
    assert len(blocks) == 1
    assert blocks[0].lines[0].text == "  x"


def test_empty_code_block():
    blocks = _blocks("```\n```\n", "```\n```\n")
    assert len(blocks) == 1
    assert blocks[0].lines == ()
    assert not has_changes(blocks)


# ─── Idempotence ──────────────────────────────────────────────────────────────

def test_building_twice_gives_identical_blocks():
    old = "# Plan\n\n```\nstep one\n```\n\n- a\n- b\n"
    new = "# Plan\n\n```\nstep one\nstep two\n```\n\n- a\n- c\n"
    assert _blocks(old, new) == _blocks(old, new)

"""Unit tests for plan_review.diff.sections."""
from plan_review.diff.line_differ import LineDiffer
from plan_review.diff.sections import (
    FlatLine,
    SectionMap,
    SectionReconciler,
    flatten_sections,
    section_id,
)
from plan_review.diff.types import DiffOpKind, DiffType, SectionKind


def _sections(old: str, new: str) -> SectionMap:
    return SectionReconciler.reconcile(LineDiffer.diff(old, new))


# ─── SectionReconciler ────────────────────────────────────────────────────────

def test_no_change_single_context_section():
    sections = _sections("x\ny", "x\ny")
    assert len(sections) == 1
    assert sections[0].kind == SectionKind.CONTEXT
    assert sections[0].new_start_line == 1
    assert not sections.has_changes()


def test_title_scenario_context_then_modified():
    sections = _sections("# Title\nold line\n", "# Title\nnew line\n")
    assert [(s.kind, s.new_start_line) for s in sections] == [
        (SectionKind.CONTEXT, 1),
        (SectionKind.MODIFIED, 2),
    ]
    modified = sections[1]
    assert modified.removed_text == "old line\n"
    assert modified.added_text == "new line\n"


def test_lone_delete_has_no_new_start_and_keeps_cursor():
    sections = _sections("a\nb\nc\n", "a\nc\n")
    assert [(s.kind, s.new_start_line) for s in sections] == [
        (SectionKind.CONTEXT, 1),
        (SectionKind.REMOVED, None),
        (SectionKind.CONTEXT, 2),
    ]


def test_lone_insert_advances_cursor():
    sections = _sections("a\nc\n", "a\nb\nb2\nc\n")
    assert [(s.kind, s.new_start_line) for s in sections] == [
        (SectionKind.CONTEXT, 1),
        (SectionKind.ADDED, 2),
        (SectionKind.CONTEXT, 4),
    ]


def test_modified_advances_by_added_line_count():
    sections = _sections("x\na\nb\ny\n", "x\nc\nd\ne\ny\n")
    assert sections[2].new_start_line == 5


def test_ids_are_sequential_and_deterministic():
    first = _sections("a\nb\nc\n", "a\nc\nd\n")
    second = _sections("a\nb\nc\n", "a\nc\nd\n")
    assert [s.id for s in first] == [section_id(i) for i in range(len(first))]
    assert first == second


def test_section_map_lookup():
    sections = _sections("a\nb\n", "a\nc\n")
    assert sections.get("section-1") is sections[1]
    assert sections.get("section-99") is None
    assert "section-0" in sections
    assert "section-99" not in sections


def test_empty_ops_empty_map():
    sections = SectionReconciler.reconcile([])
    assert len(sections) == 0
    assert list(sections) == []


# ─── flatten_sections ─────────────────────────────────────────────────────────

def test_flatten_context_offsets():
    lines = flatten_sections(_sections("a\nb\n", "a\nb\n"))
    assert lines == [
        FlatLine("a", DiffType.CONTEXT, "section-0", 0),
        FlatLine("b", DiffType.CONTEXT, "section-0", 1),
    ]


def test_flatten_modified_runs_are_numbered_independently():
    lines = flatten_sections(_sections("x\na\nb\ny\n", "x\nc\nd\ne\ny\n"))
    modified = [
        (line.text, line.diff_type, line.section_local_offset)
        for line in lines
        if line.section_id == "section-1"
    ]
    assert modified == [
        ("a", DiffType.REMOVED, 0),
        ("b", DiffType.REMOVED, 1),
        ("c", DiffType.ADDED, 0),
        ("d", DiffType.ADDED, 1),
        ("e", DiffType.ADDED, 2),
    ]


def test_flatten_removed_section():
    lines = flatten_sections(_sections("a\nb\n", "a\n"))
    assert lines[-1] == FlatLine("b", DiffType.REMOVED, "section-1", 0)


# ─── Kind mapping ─────────────────────────────────────────────────────────────

def test_op_kind_maps_to_section_kind():
    pairs = [
        (DiffOpKind.EQUAL, SectionKind.CONTEXT),
        (DiffOpKind.INSERT, SectionKind.ADDED),
        (DiffOpKind.DELETE, SectionKind.REMOVED),
    ]
    for op_kind, kind in pairs:
        assert SectionKind.from_diff_type(DiffType.from_op_kind(op_kind)) == kind
        assert kind.diff_type == DiffType.from_op_kind(op_kind)
    assert SectionKind.MODIFIED.diff_type is None


def test_single_run_sections_flatten_with_their_own_diff_type():
    sections = _sections("a\nb\n", "b\nc\n")
    assert [s.kind for s in sections] == [
        SectionKind.REMOVED,
        SectionKind.CONTEXT,
        SectionKind.ADDED,
    ]
    assert [s.runs()[0][0] for s in sections] == [
        DiffType.REMOVED,
        DiffType.CONTEXT,
        DiffType.ADDED,
    ]

"""Unit tests for plan_review.diff.line_differ."""
import pytest

from plan_review.diff.line_differ import (
    DiffOp,
    LineDiffer,
    count_lines,
    new_text,
    normalize_newlines,
    old_text,
    split_lines,
)
from plan_review.diff.types import DiffOpKind


# ─── split_lines / count_lines ────────────────────────────────────────────────

def test_split_lines_drops_single_trailing_newline():
    assert split_lines("a\nb\n") == ["a", "b"]


def test_split_lines_keeps_inner_blank_lines():
    assert split_lines("a\n\n") == ["a", ""]


def test_split_lines_empty_is_one_empty_line():
    assert split_lines("") == [""]
    assert count_lines("") == 1


def test_count_lines_without_trailing_newline():
    assert count_lines("a\nb") == 2


def test_normalize_newlines():
    assert normalize_newlines("a\r\nb\rc\n") == "a\nb\nc\n"


# ─── LineDiffer.diff ──────────────────────────────────────────────────────────

def test_identical_documents_single_equal_op():
    ops = LineDiffer.diff("x\ny", "x\ny")
    assert ops == [DiffOp(DiffOpKind.EQUAL, "x\ny")]


def test_title_scenario_ops():
    ops = LineDiffer.diff("# Title\nold line\n", "# Title\nnew line\n")
    assert ops == [
        DiffOp(DiffOpKind.EQUAL, "# Title\n"),
        DiffOp(DiffOpKind.DELETE, "old line\n"),
        DiffOp(DiffOpKind.INSERT, "new line\n"),
    ]


def test_pure_insertion_from_empty():
    ops = LineDiffer.diff("", "a\nb\n")
    assert ops == [DiffOp(DiffOpKind.INSERT, "a\nb\n")]


def test_both_empty_yields_no_ops():
    assert LineDiffer.diff("", "") == []


def test_no_zero_length_ops():
    ops = LineDiffer.diff("a\nb\nc\n", "a\nc\nd\n")
    assert all(op.text for op in ops)


def test_missing_final_newline_is_a_change():
    ops = LineDiffer.diff("a", "a\n")
    assert [op.kind for op in ops] == [DiffOpKind.DELETE, DiffOpKind.INSERT]


def test_has_changes():
    assert not LineDiffer.has_changes(LineDiffer.diff("a\n", "a\n"))
    assert LineDiffer.has_changes(LineDiffer.diff("a\n", "b\n"))


def test_op_line_count():
    assert DiffOp(DiffOpKind.EQUAL, "a\nb\n").line_count == 2


# ─── Round-trip ───────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    ("old", "new"),
    [
        ("", ""),
        ("", "only new\n"),
        ("only old\n", ""),
        ("a\nb\nc\n", "a\nB\nc\nd\n"),
        ("no newline", "no newline\nmore"),
        ("# Plan\n\n```\ncode\n```\n", "# Plan\n\n```\ncode\nmore\n```\ntail\n"),
        ("x\n\n\ny\n", "\n\nx\ny\n\n"),
    ],
)
def test_ops_reconstruct_both_documents(old, new):
    ops = LineDiffer.diff(old, new)
    assert old_text(ops) == old
    assert new_text(ops) == new


def test_diff_is_deterministic():
    old = "one\ntwo\nthree\nfour\n"
    new = "one\n2\nthree\nfive\nsix\n"
    assert LineDiffer.diff(old, new) == LineDiffer.diff(old, new)

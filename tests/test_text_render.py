"""Unit tests for plan_review.render.text."""
from plan_review.diff.hunks import HunkBuilder
from plan_review.diff.line_differ import LineDiffer
from plan_review.render.text import (
    format_blocks,
    format_split,
    format_split_panels,
    format_unified,
    no_changes_message,
)
from plan_review.session import ReviewSession

TEN_LINES = "".join(f"{c}\n" for c in "abcdefghij")


def _hunks(old: str, new: str, context: int = 1):
    return HunkBuilder(context).build(LineDiffer.diff(old, new))


def test_no_changes_message():
    assert no_changes_message("v1", "v2") == "No changes between v1 and v2"


def test_unified_has_header_gaps_and_prefixes():
    out = format_unified(_hunks(TEN_LINES, TEN_LINES.replace("e\n", "E\n"))).splitlines()
    assert out[0] == "3 lines hidden"
    assert out[1] == "@@ -4,3 +4,3 @@"
    assert out[2] == "   4    4  d"
    assert out[3] == "   5      -e"
    assert out[4] == "        5 +E"
    assert out[-1] == "4 lines hidden"


def test_split_puts_old_left_and_new_right():
    out = format_split(_hunks("a\nb\n", "a\nc\n"), width=12).splitlines()
    assert out[0] == "@@ -1,2 +1,2 @@"
    assert out[1] == "   1  a      |    1  a"
    assert out[2] == "   2 -b      |    2 +c"


def test_split_padding_cell_is_blank():
    out = format_split(_hunks("a\nb\nc\n", "a\nX\n"), width=12).splitlines()
    assert out[-1] == "   3 -c      |"


def test_format_blocks(session: ReviewSession):
    session.load("# Title\nold line\n", "# Title\nnew line\n")
    addresses = [session.line_addresses(b) for b in session.blocks]
    assert format_blocks(session.blocks, addresses).splitlines() == [
        "[context @ section-0]",
        "   1   # Title",
        "[modified @ section-1]",
        "[removed @ section-1]",
        "     - old line",
        "[added @ section-1]",
        "   2 + new line",
    ]


# ─── Split structured view ────────────────────────────────────────────────────

def _split_panels(session: ReviewSession, old: str, new: str, width: int = 20) -> list[str]:
    session.load(old, new)
    addresses = [
        session.panel_line_addresses(row.right) if row.right else None
        for row in session.panel_rows
    ]
    return format_split_panels(session.panel_rows, addresses, width=width).splitlines()


def test_split_panels_old_left_new_right(session: ReviewSession):
    assert _split_panels(session, "# Title\nold line\n", "# Title\nnew line\n") == [
        "[context @ section-0]",
        f"{'  # Title':<20} |    1   # Title",
        "[modified @ section-1]",
        f"{'- old line':<20} |    2 + new line",
    ]


def test_split_panels_spacers(session: ReviewSession):
    assert _split_panels(session, "a\n", "a\nb\n")[-1] == f"{'':<20} |    2 + b"
    assert _split_panels(session, "a\nb\n", "a\n")[-1] == f"{'- b':<20} |"

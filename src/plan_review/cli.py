"""CLI entrypoint for plan-review.

Compares two revisions of a Markdown document from the terminal: the
raw line diff, the structured (block) view with resolved line
addresses, and the comment prompt for a set of line comments.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from plan_review.config import settings
from plan_review.diff.types import ViewMode
from plan_review.render.text import (
    format_blocks,
    format_split,
    format_split_panels,
    format_unified,
    no_changes_message,
)
from plan_review.session import ReviewSession


def _load_session(old_path: str, new_path: str) -> ReviewSession:
    """Read both files and build a session over them."""
    session = ReviewSession()
    session.load(
        Path(old_path).read_text(encoding="utf-8"),
        Path(new_path).read_text(encoding="utf-8"),
    )
    return session


def _parse_comment(raw: str) -> tuple[int, str]:
    """Split a ``LINE:TEXT`` option value."""
    line, sep, text = raw.partition(":")
    if not sep or not line.strip().isdigit():
        raise click.BadParameter(f"expected LINE:TEXT, got {raw!r}")
    return int(line), text


@click.group()
def cli() -> None:
    """plan-review CLI: diff and annotate document revisions."""
    try:
        settings.validate()
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("old_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("new_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--context", "context_lines", type=int, default=None,
              help="Unchanged lines shown around each change.")
@click.option("--view", type=click.Choice([m.value for m in ViewMode]), default=None,
              help="Raw-text layout (default from PLAN_REVIEW_VIEW_MODE).")
@click.option("--old-label", default=None, help="Label for the old revision.")
@click.option("--new-label", default=None, help="Label for the new revision.")
def diff(
    old_path: str,
    new_path: str,
    context_lines: int | None,
    view: str | None,
    old_label: str | None,
    new_label: str | None,
) -> None:
    """Show the raw line diff between OLD_PATH and NEW_PATH."""
    session = _load_session(old_path, new_path)
    try:
        hunks = session.hunks(context_lines)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if not hunks:
        click.echo(no_changes_message(old_label or old_path, new_label or new_path))
        return

    if ViewMode(view or settings.view_mode) == ViewMode.SPLIT:
        click.echo(format_split(hunks))
    else:
        click.echo(format_unified(hunks))


@cli.command()
@click.argument("old_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("new_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--view", type=click.Choice([m.value for m in ViewMode]), default=None,
              help="Structured layout (default from PLAN_REVIEW_VIEW_MODE).")
def blocks(old_path: str, new_path: str, view: str | None) -> None:
    """Show the structured view with new-document line addresses."""
    session = _load_session(old_path, new_path)
    if not session.has_changes:
        click.echo(no_changes_message(old_path, new_path))
        return

    if ViewMode(view or settings.view_mode) == ViewMode.SPLIT:
        rows = session.panel_rows
        addresses = [
            session.panel_line_addresses(row.right) if row.right else None
            for row in rows
        ]
        click.echo(format_split_panels(rows, addresses))
    else:
        addresses = [session.line_addresses(b) for b in session.blocks]
        click.echo(format_blocks(session.blocks, addresses))


@cli.command()
@click.argument("old_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("new_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-c", "--comment", "comments", multiple=True,
              help="LINE:TEXT comment on a new-document line.")
@click.option("-r", "--removed-comment", "removed_comments", multiple=True,
              help="LINE:TEXT comment on an old-document line.")
def prompt(
    old_path: str,
    new_path: str,
    comments: tuple[str, ...],
    removed_comments: tuple[str, ...],
) -> None:
    """Build the comment prompt for a set of line comments."""
    session = _load_session(old_path, new_path)
    try:
        for raw in comments:
            line, text = _parse_comment(raw)
            session.comment_on_raw_line("new", line, text)
        for raw in removed_comments:
            line, text = _parse_comment(raw)
            session.comment_on_raw_line("old", line, text)
    except KeyError as exc:
        click.echo(f"Error: {exc.args[0]}", err=True)
        sys.exit(1)

    text = session.comment_prompt()
    if not text:
        click.echo("No comments.", err=True)
        return
    click.echo(text)


if __name__ == "__main__":
    cli()

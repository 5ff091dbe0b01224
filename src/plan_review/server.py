"""MCP server for reviewing and annotating document revisions.

This is the main entry point. It creates a FastMCP server, initializes
a review session, and registers all tools.

Run with:
    uv run plan-review-mcp
    # or
    python -m plan_review.server
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from plan_review.config import settings
from plan_review.session import ReviewSession
from plan_review.tools.review_tools import register_review_tools

mcp = FastMCP(
    "plan-review",
    instructions=(
        "Plan-review MCP server for comparing two revisions of a "
        "Markdown document and collecting line comments. Load a pair "
        "with load_documents, inspect it with get_diff_hunks or "
        "get_render_blocks, then add comments and fetch the prompt "
        "with get_comment_prompt."
    ),
)


def _initialize() -> None:
    """Initialize the session and register tools."""
    settings.validate()
    register_review_tools(mcp, ReviewSession(settings))


def main() -> None:
    """Entry point for the MCP server."""
    _initialize()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

"""MCP tool registration."""

from plan_review.tools.review_tools import register_review_tools

__all__ = ["register_review_tools"]

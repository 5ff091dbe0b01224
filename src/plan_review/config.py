from __future__ import annotations

import logging
import os

from plan_review.comments.store import DEFAULT_PROMPT_HEADER
from plan_review.diff.types import ViewMode


def _parse_int(raw: str) -> int | None:
    try:
        return int(raw.strip())
    except ValueError:
        return None


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self) -> None:
        self._raw_context_lines: str = os.environ.get("PLAN_REVIEW_CONTEXT_LINES", "3")
        self.context_lines: int = _parse_int(self._raw_context_lines) or 0
        self.view_mode: str = os.environ.get("PLAN_REVIEW_VIEW_MODE", ViewMode.UNIFIED.value)
        self.prompt_header: str = os.environ.get(
            "PLAN_REVIEW_PROMPT_HEADER", DEFAULT_PROMPT_HEADER
        )
        self.log_level: str = os.environ.get("PLAN_REVIEW_LOG_LEVEL", "WARNING").upper()

    def validate(self) -> None:
        parsed = _parse_int(self._raw_context_lines)
        if parsed is None or parsed < 0:
            raise ValueError(
                "PLAN_REVIEW_CONTEXT_LINES must be a non-negative integer, "
                f"got {self._raw_context_lines!r}"
            )
        if self.view_mode not in {m.value for m in ViewMode}:
            raise ValueError(
                f"PLAN_REVIEW_VIEW_MODE must be 'unified' or 'split', got {self.view_mode!r}"
            )
        if self.log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"PLAN_REVIEW_LOG_LEVEL is not a logging level: {self.log_level!r}")
        if not self.prompt_header.strip():
            raise ValueError("PLAN_REVIEW_PROMPT_HEADER must not be empty")


settings = Settings()

"""
Shared pytest fixtures for plan-review tests.

Provides:
  - settings isolated from PLAN_REVIEW_* environment variables
  - a fresh ReviewSession per test
  - the "# Title" revision pair used throughout the suite
"""
from __future__ import annotations

import pytest

from plan_review.config import Settings
from plan_review.session import ReviewSession, build_pipeline

OLD_TITLE_DOC = "# Title\nold line\n"
NEW_TITLE_DOC = "# Title\nnew line\n"

_ENV_VARS = (
    "PLAN_REVIEW_CONTEXT_LINES",
    "PLAN_REVIEW_VIEW_MODE",
    "PLAN_REVIEW_PROMPT_HEADER",
    "PLAN_REVIEW_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def test_settings(clean_env: pytest.MonkeyPatch) -> Settings:
    return Settings()


@pytest.fixture
def session(test_settings: Settings) -> ReviewSession:
    build_pipeline.cache_clear()
    return ReviewSession(test_settings)


@pytest.fixture
def title_session(session: ReviewSession) -> ReviewSession:
    session.load(OLD_TITLE_DOC, NEW_TITLE_DOC)
    return session

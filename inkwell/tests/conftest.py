"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterator

import pytest

from inkwell.config import Settings
from inkwell.services.sqlite_repo import LocalSQLiteBlogRepository


@pytest.fixture()
def repository(tmp_path: Path) -> Iterator[LocalSQLiteBlogRepository]:
    """Provide a repository backed by a throwaway SQLite file."""

    repo = LocalSQLiteBlogRepository(db_path=tmp_path / "blog.db")
    yield repo
    repo.close()


@pytest.fixture()
def offline_settings(tmp_path: Path) -> Settings:
    """Settings without a credential, so every assistant answer is heuristic."""

    return Settings(gemini_api_key=None, db_path=tmp_path / "blog.db")


@pytest.fixture()
def online_settings(tmp_path: Path) -> Settings:
    """Settings with a credential and the feature flag on."""

    return Settings(gemini_api_key="test-key", db_path=tmp_path / "blog.db")


@pytest.fixture()
def ticking_clock() -> Callable[[], datetime]:
    """Return a clock that advances one second per call."""

    start = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
    ticks = {"count": 0}

    def _clock() -> datetime:
        ticks["count"] += 1
        return start + timedelta(seconds=ticks["count"])

    return _clock

"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def simple_run(fixtures_dir: Path) -> Path:
    """Return path to simple_run.jsonl fixture."""
    return fixtures_dir / "simple_run.jsonl"


@pytest.fixture
def with_errors_run(fixtures_dir: Path) -> Path:
    """Return path to with_errors.jsonl fixture."""
    return fixtures_dir / "with_errors.jsonl"


@pytest.fixture
def explicit_progress_run(fixtures_dir: Path) -> Path:
    """Return path to explicit_progress.jsonl fixture."""
    return fixtures_dir / "explicit_progress.jsonl"


@pytest.fixture
def read_events() -> list[dict]:
    """The Read start/complete pair from the reference scenario."""
    return [
        {"type": "tool_start", "tool": "Read", "args": {"file_path": "a.ts"}},
        {"type": "tool_complete", "tool": "Read", "result": "const x=1;", "success": True},
    ]

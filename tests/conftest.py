"""Shared test fixtures: clean environment, fixture paths."""

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _clean_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Isolate Settings from the developer's shell and .env file."""
    for key in list(os.environ):
        if key.startswith("TESTFLOW_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES / "diagrams"


@pytest.fixture
def compile_log() -> Generator[logging.Logger, None, None]:
    """The JSON compile logger, with file handlers removed afterwards."""
    log = logging.getLogger("testflow.compile")
    log.handlers.clear()
    yield log
    for handler in log.handlers:
        handler.close()
    log.handlers.clear()

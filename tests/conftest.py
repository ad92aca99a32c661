"""Pytest configuration and fixtures."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from statement_analytics.logging_setup import PACKAGE_LOGGER
from statement_analytics.parsers import StatementParser


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Keep tests away from the user's config and log level settings."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg_config"))
    monkeypatch.delenv("STATEMENT_ANALYTICS_LOG_LEVEL", raising=False)

    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def basic_statement_file(fixtures_dir: Path) -> Path:
    """Return path to a statement with seven transactions and six noise lines."""
    return fixtures_dir / "statement_basic.txt"


@pytest.fixture
def empty_statement_file(fixtures_dir: Path) -> Path:
    """Return path to a statement without any transaction lines."""
    return fixtures_dir / "statement_empty.txt"


@pytest.fixture
def basic_statement_text(basic_statement_file: Path) -> str:
    """Return the raw text of the basic statement."""
    return basic_statement_file.read_text(encoding="utf-8")


@pytest.fixture
def parser() -> StatementParser:
    """Return a statement parser with the default rules."""
    return StatementParser()

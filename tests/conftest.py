"""Shared pytest fixtures for propwrap tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from propwrap.infrastructure.stores import JsonFileStore, MemoryStore, reset_standard_store


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def json_store(tmp_path: Path) -> JsonFileStore:
    """JSON file store inside the test's temp directory."""
    return JsonFileStore(tmp_path / "store" / "defaults.json")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None]:
    """Keep user config and the process-wide store out of every test."""
    monkeypatch.delenv("PROPWRAP_CONFIG", raising=False)
    monkeypatch.delenv("PROPWRAP_STORE__BACKEND", raising=False)
    monkeypatch.delenv("PROPWRAP_STORE__PATH", raising=False)
    monkeypatch.chdir(tmp_path)
    reset_standard_store()
    yield
    reset_standard_store()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test (the CLI reconfigures it)."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("propwrap")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)

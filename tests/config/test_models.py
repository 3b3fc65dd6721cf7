"""Tests for the pydantic config models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from propwrap.config.models import DEFAULT_STORE_PATH, LoggingConfig, StoreConfig


class TestDefaults:
    def test_store_defaults(self) -> None:
        cfg = StoreConfig()
        assert cfg.backend == "memory"
        assert cfg.path == DEFAULT_STORE_PATH

    def test_logging_defaults(self) -> None:
        cfg = LoggingConfig()
        assert cfg.verbose is False
        assert cfg.log_json is False


class TestValidation:
    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StoreConfig(backend="redis")  # type: ignore[arg-type]

    def test_path_coerced(self) -> None:
        assert StoreConfig(path="x/y.json").path == Path("x/y.json")  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        cfg = StoreConfig()
        with pytest.raises(ValidationError):
            cfg.backend = "json"  # type: ignore[misc]

"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, propwrap.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel

DEFAULT_STORE_PATH = Path.home() / ".propwrap" / "defaults.json"


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    backend: Literal["memory", "json"] = "memory"
    path: Path = DEFAULT_STORE_PATH


class LoggingConfig(BaseModel):
    """[logging] section."""

    model_config = {"frozen": True}

    verbose: bool = False
    log_json: bool = False


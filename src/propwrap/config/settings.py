"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PROPWRAP_*`` prefix
  3. TOML file    — ``propwrap.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`propwrap.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from propwrap.config.discovery import find_config
from propwrap.config.models import LoggingConfig, StoreConfig
from propwrap.errors import PropwrapError


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``propwrap.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise PropwrapError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class PropwrapSettings(BaseSettings):
    """Unified settings for the library and the ``propwrap`` CLI.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
        store: Backend of the standard defaults store.
        logging: structlog verbosity and renderer.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PROPWRAP_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        verbose: bool = False,
        log_json: bool = False,
        store_path: Path | None = None,
    ) -> PropwrapSettings:
        """Construct settings from a CLI invocation (or library defaults).

        Discovers ``propwrap.toml`` via walk-up from *start* (or uses the
        explicit *config_path*). Flags only override when set, so a
        ``verbose = true`` in TOML survives a run without ``-v``.
        A *store_path* implies the JSON backend.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        overrides: dict[str, Any] = {}
        logging_flags = {
            name: True for name, flag in (("verbose", verbose), ("log_json", log_json)) if flag
        }
        if logging_flags:
            overrides["logging"] = logging_flags
        if store_path is not None:
            overrides["store"] = {"backend": "json", "path": store_path}

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None

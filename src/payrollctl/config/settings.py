"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PAYROLLCTL_*`` prefix (``PAYROLLCTL_DATABASE__URL`` for nested)
  3. TOML file    — ``payrollctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from payrollctl.config.models import DatabaseConfig, SecurityConfig, SeedConfig

CONFIG_FILENAME = "payrollctl.toml"
CONFIG_ENV_VAR = "PAYROLLCTL_CONFIG"
DATA_DIRNAME = ".payrollctl"
TABLE_SECTIONS = ("database", "seed", "security")


class ConfigFileError(ValueError):
    """The config file is missing, not valid TOML, or has a malformed section."""


def locate_project(start: Path | None = None) -> tuple[Path, Path | None]:
    """Find the project root and its config file, walking up from *start*.

    A directory is a project root if it holds ``payrollctl.toml`` or an
    existing ``.payrollctl/`` data directory (a project that was
    initialised without a config file).  ``PAYROLLCTL_CONFIG`` bypasses the
    walk; it must name an existing file.

    Returns ``(root, config_path)``.  With no match the root is *start*
    (default: CWD) and ``config_path`` is None.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if not path.is_file():
            msg = f"{CONFIG_ENV_VAR} points to a missing file: {path}"
            raise ConfigFileError(msg)
        return path.parent, path

    origin = start or Path.cwd()
    for directory in (origin.resolve(), *origin.resolve().parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return directory, candidate
        if (directory / DATA_DIRNAME).is_dir():
            return directory, None
    return origin, None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the project's ``payrollctl.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigFileError(msg) from exc
        for section in TABLE_SECTIONS:
            if section in self._data and not isinstance(self._data[section], dict):
                msg = f"[{section}] in {toml_path} must be a table, not a plain value"
                raise ConfigFileError(msg)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class PayrollSettings(BaseSettings):
    """Unified settings for the payrollctl CLI.

    Attributes:
        root: Project directory (parent of ``payrollctl.toml``, or CWD if no
            config was found).  The default SQLite database lives under it.
        actor: Email of the user the command acts as.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PAYROLLCTL_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    actor: str | None = None

    # --- TOML sections ---
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

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
        root: Path | None = None,
        **cli_flags: Any,
    ) -> PayrollSettings:
        """Construct settings from a CLI invocation.

        Discovers ``payrollctl.toml`` via walk-up (or explicit *config_path*),
        resolves *root* from the config file's parent directory, and merges
        CLI flags as highest-priority overrides.  ``None`` flags are left to
        the lower-priority sources.
        """
        toml_path: Path | None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {toml_path}"
                raise ConfigFileError(msg)
            found_root = toml_path.parent
        else:
            found_root, toml_path = locate_project(root)

        resolved_root = root if root is not None else found_root

        overrides = {key: value for key, value in cli_flags.items() if value is not None}

        _tls.toml_path = toml_path
        try:
            return cls(root=resolved_root, config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None

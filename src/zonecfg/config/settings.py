"""ZoneCfgSettings: CLI flags, ``ZONECFG_*`` env vars and zonecfg.toml.

Sources in priority order:

1. CLI flags (init kwargs)
2. Environment, ``ZONECFG_`` prefix, ``__`` between section and key
   (``ZONECFG_OUTPUT__FORMAT=json``)
3. The ``[output]`` and ``[decode]`` sections of zonecfg.toml
4. Defaults from :mod:`zonecfg.config.models`
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from zonecfg.config.discovery import find_config, load_config
from zonecfg.config.models import DecodeConfig, OutputConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by a validated zonecfg.toml.

    Only keys actually written in the file are reported, so env vars and
    defaults still fill in the rest of each section.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path is None:
            return
        try:
            config = load_config(toml_path)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc
        except ValidationError as exc:
            msg = f"Invalid config in {toml_path}: {exc.errors()[0]['msg']}"
            raise click.ClickException(msg) from exc
        self._data = config.model_dump(exclude_unset=True)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Sources are built inside BaseSettings.__init__, which cannot take the
# path as an argument; from_cli parks it here for the duration.
_tls = threading.local()


class ZoneCfgSettings(BaseSettings):
    """Frozen settings for one invocation.

    Attributes:
        config_path: The zonecfg.toml that was read, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ZONECFG_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    output: OutputConfig = Field(default_factory=OutputConfig)
    decode: DecodeConfig = Field(default_factory=DecodeConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None))
        return init_settings, env_settings, toml

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start_dir: Path | None = None,
        strict: bool = False,
        **cli_flags: Any,
    ) -> ZoneCfgSettings:
        """Build settings for a CLI invocation.

        An explicit *config_path* is used only if the file exists; without
        one, zonecfg.toml is looked up from *start_dir* (default: cwd).
        *strict* forces ``decode.strict`` on regardless of other sources.
        """
        if config_path:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config(start_dir)

        if strict:
            cli_flags["decode"] = {"strict": True}

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            del _tls.toml_path

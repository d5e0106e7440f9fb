"""Locating and reading zonecfg.toml."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from zonecfg.config.models import ZoneCfgConfig

CONFIG_FILENAME = "zonecfg.toml"
CONFIG_ENV_VAR = "ZONECFG_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest zonecfg.toml at or above *start* (default: cwd).

    When ``ZONECFG_CONFIG`` is set it is the only candidate considered.
    """
    if override := os.environ.get(CONFIG_ENV_VAR):
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> ZoneCfgConfig:
    """Parse and validate a config file; defaults when there is none.

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML.
        pydantic.ValidationError: If a section holds an invalid value.
    """
    path = path or find_config(cwd)
    if path is None:
        return ZoneCfgConfig()
    return ZoneCfgConfig.model_validate(tomllib.loads(path.read_text(encoding="utf-8")))

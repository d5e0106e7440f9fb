"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, zonecfg.toml only contains
overrides.  An empty (or missing) file is a valid configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    format: Literal["yaml", "json"] = "yaml"


class DecodeConfig(BaseModel):
    """[decode] section."""

    model_config = {"frozen": True}

    strict: bool = False


class ZoneCfgConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    output: OutputConfig = Field(default_factory=OutputConfig)
    decode: DecodeConfig = Field(default_factory=DecodeConfig)

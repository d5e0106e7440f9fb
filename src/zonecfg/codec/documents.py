"""YAML and JSON text front-ends for zone configuration documents.

YAML is the human-edited format.  It leaves out ``subzones`` and
``subzone_spans`` (they are ignored on input too), and renders constraint
and lease-preference values in flow style::

    constraints: [+region=us-east1, -ssd]
    lease_preferences: [[+region=us-east1]]

JSON carries every field, subzones included.
"""

from __future__ import annotations

import json
from io import StringIO
from pathlib import Path
from typing import Any, Literal

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

from zonecfg.codec.zone import (
    FIELD_CONSTRAINTS,
    FIELD_LEASE_PREFERENCES,
    marshal_zone_config,
    unmarshal_zone_config,
)
from zonecfg.domain.errors import ParseError
from zonecfg.domain.zone import ZoneConfig

DocumentFormat = Literal["yaml", "json"]

_SUFFIX_FORMATS: dict[str, DocumentFormat] = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
}

_FLOW_FIELDS = (FIELD_CONSTRAINTS, FIELD_LEASE_PREFERENCES)


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML emitter.

    A new instance per call keeps a failed dump from leaving shared
    emitter state broken for the next caller.
    """
    y = YAML()
    y.default_flow_style = False
    return y


def format_for_path(path: Path) -> DocumentFormat:
    """Infer the document format from a file suffix.

    Raises:
        ValueError: If the suffix is not ``.yaml``, ``.yml`` or ``.json``.
    """
    fmt = _SUFFIX_FORMATS.get(path.suffix.lower())
    if fmt is None:
        msg = f"Cannot infer document format from {path.name!r}; use .yaml, .yml or .json"
        raise ValueError(msg)
    return fmt


def load_document(text: str, fmt: DocumentFormat) -> Any:
    """Parse *text* into a plain document value.

    Raises:
        ParseError: On YAML or JSON syntax errors.
    """
    if fmt == "json":
        try:
            return json.loads(text) if text.strip() else None
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON document: {exc}"
            raise ParseError(msg) from exc
    try:
        return YAML(typ="safe").load(text)
    except YAMLError as exc:
        msg = f"Invalid YAML document: {exc}"
        raise ParseError(msg) from exc


def _flow(value: Any) -> Any:
    """Wrap lists and mappings so ruamel emits them in flow style."""
    if isinstance(value, list):
        seq = CommentedSeq(_flow(v) for v in value)
        seq.fa.set_flow_style()
        return seq
    if isinstance(value, dict):
        cmap = CommentedMap((k, _flow(v)) for k, v in value.items())
        cmap.fa.set_flow_style()
        return cmap
    return value


def dump_document(document: dict[str, Any], fmt: DocumentFormat) -> str:
    """Render a document value as YAML or JSON text."""
    if fmt == "json":
        return json.dumps(document, indent=2) + "\n"

    ordered = CommentedMap()
    for key, value in document.items():
        ordered[key] = _flow(value) if key in _FLOW_FIELDS else value
    buf = StringIO()
    _new_yaml().dump(ordered, buf)
    return buf.getvalue()


def zone_config_to_text(cfg: ZoneConfig, fmt: DocumentFormat = "yaml") -> str:
    """Encode *cfg* as YAML (without subzones) or JSON (with subzones)."""
    document = marshal_zone_config(cfg, include_subzones=fmt == "json")
    return dump_document(document, fmt)


def zone_config_from_text(
    text: str,
    fmt: DocumentFormat = "yaml",
    *,
    existing: ZoneConfig | None = None,
    strict: bool = False,
) -> ZoneConfig:
    """Decode *text* on top of *existing* (or an empty config).

    Raises:
        ParseError: On syntax errors or undecodable fields.
    """
    document = load_document(text, fmt)
    return unmarshal_zone_config(
        existing if existing is not None else ZoneConfig(),
        document,
        strict=strict,
        include_subzones=fmt == "json",
    )

"""Zone configuration document codec.

:class:`MarshalableZoneConfig` mirrors :class:`~zonecfg.domain.zone.ZoneConfig`
with the shapes the document codecs need, plus the deprecated
``experimental_lease_preferences`` field.  Both ``lease_preferences``
(current) and ``experimental_lease_preferences`` (older writers) are
accepted on input and land in the same ``ZoneConfig`` field.  Output only
ever carries ``lease_preferences``.

Decoding is a partial update: it takes the existing value explicitly,
seeds the marshalable form from it, and overwrites only the fields the
incoming document names.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Annotated, Any

from pydantic import BaseModel, Field, Strict, TypeAdapter, ValidationError

from zonecfg.codec.constraints import decode_constraints_list, encode_constraints_list
from zonecfg.codec.lease_preferences import decode_lease_preferences, encode_lease_preferences
from zonecfg.domain.constraints import ConstraintGroup, LeasePreference
from zonecfg.domain.errors import ParseError
from zonecfg.domain.zone import GCPolicy, Int32, Int64, Subzone, SubzoneSpan, ZoneConfig

FIELD_RANGE_MIN_BYTES = "range_min_bytes"
FIELD_RANGE_MAX_BYTES = "range_max_bytes"
FIELD_GC = "gc"
FIELD_NUM_REPLICAS = "num_replicas"
FIELD_CONSTRAINTS = "constraints"
FIELD_LEASE_PREFERENCES = "lease_preferences"
FIELD_EXPERIMENTAL_LEASE_PREFERENCES = "experimental_lease_preferences"
FIELD_SUBZONES = "subzones"
FIELD_SUBZONE_SPANS = "subzone_spans"

SUBZONE_FIELDS = frozenset({FIELD_SUBZONES, FIELD_SUBZONE_SPANS})

_STRICT_INT64: TypeAdapter[int] = TypeAdapter(Annotated[Int64, Strict()])
_STRICT_INT32: TypeAdapter[int] = TypeAdapter(Annotated[Int32, Strict()])


class MarshalableZoneConfig(BaseModel):
    """Transient document-shaped view of a ZoneConfig.

    Built fresh for every encode and decode call.
    ``experimental_lease_preferences`` is ``None`` when absent; an empty
    tuple is an explicit (empty) value.
    """

    model_config = {"frozen": True}

    range_min_bytes: Int64 = 0
    range_max_bytes: Int64 = 0
    gc: GCPolicy = Field(default_factory=GCPolicy)
    num_replicas: Int32 = 0
    constraints: tuple[ConstraintGroup, ...] = ()
    lease_preferences: tuple[LeasePreference, ...] = ()
    experimental_lease_preferences: tuple[LeasePreference, ...] | None = None
    subzones: tuple[Subzone, ...] = ()
    subzone_spans: tuple[SubzoneSpan, ...] = ()


# ---------------------------------------------------------------------------
# Reconciler
# ---------------------------------------------------------------------------


def zone_config_to_marshalable(cfg: ZoneConfig) -> MarshalableZoneConfig:
    """Build the marshalable form of *cfg*.

    The deprecated field is intentionally never populated, so it never
    reappears in freshly written documents.
    """
    fields: dict[str, Any] = {
        "range_min_bytes": cfg.range_min_bytes,
        "range_max_bytes": cfg.range_max_bytes,
        "gc": cfg.gc,
        "constraints": cfg.constraints,
        "lease_preferences": cfg.lease_preferences,
        "subzones": cfg.subzones,
        "subzone_spans": cfg.subzone_spans,
    }
    if cfg.num_replicas != 0:
        fields["num_replicas"] = cfg.num_replicas
    return MarshalableZoneConfig(**fields)


def zone_config_from_marshalable(m: MarshalableZoneConfig) -> ZoneConfig:
    """Collapse the marshalable form back into a ZoneConfig."""
    lease_preferences = m.lease_preferences
    # A present experimental_lease_preferences can only have come from the
    # incoming document (storage never holds it), whereas lease_preferences
    # may be the stored value the user is now overwriting.
    if m.experimental_lease_preferences is not None:
        lease_preferences = m.experimental_lease_preferences
    return ZoneConfig(
        range_min_bytes=m.range_min_bytes,
        range_max_bytes=m.range_max_bytes,
        gc=m.gc,
        num_replicas=m.num_replicas,
        constraints=m.constraints,
        lease_preferences=lease_preferences,
        subzones=m.subzones,
        subzone_spans=m.subzone_spans,
    )


# ---------------------------------------------------------------------------
# Per-field decoders: (raw document value, current value, strict) -> new value
# ---------------------------------------------------------------------------

_FieldDecoder = Callable[[Any, Any, bool], Any]


def _int_decoder(adapter: TypeAdapter[int], name: str) -> _FieldDecoder:
    def decode(raw: Any, _current: Any, _strict: bool) -> int:
        if raw is None:
            return 0
        try:
            return adapter.validate_python(raw)
        except ValidationError as exc:
            msg = f"invalid {name}: {raw!r}"
            raise ParseError(msg) from exc

    return decode


def _decode_gc(raw: Any, current: GCPolicy, strict: bool) -> GCPolicy:
    if raw is None:
        return GCPolicy()
    if not isinstance(raw, Mapping):
        msg = f"gc must be a mapping, not {type(raw).__name__}"
        raise ParseError(msg)
    known = {f.alias or name for name, f in GCPolicy.model_fields.items()}
    unknown = sorted(str(k) for k in raw if k not in known)
    if strict and unknown:
        msg = f"unknown gc fields: {', '.join(unknown)}"
        raise ParseError(msg)
    merged = {**current.model_dump(by_alias=True), **{k: v for k, v in raw.items() if k in known}}
    try:
        return GCPolicy.model_validate(merged, strict=True)
    except ValidationError as exc:
        msg = f"invalid gc policy: {dict(raw)!r}"
        raise ParseError(msg) from exc


def _decode_constraints(raw: Any, _current: Any, _strict: bool) -> tuple[ConstraintGroup, ...]:
    return decode_constraints_list(raw)


def _decode_lease_preferences(
    raw: Any, _current: Any, _strict: bool
) -> tuple[LeasePreference, ...]:
    return decode_lease_preferences(raw)


def _decode_experimental_lease_preferences(
    raw: Any, _current: Any, _strict: bool
) -> tuple[LeasePreference, ...] | None:
    # An explicit null leaves the deprecated field absent.
    if raw is None:
        return None
    return decode_lease_preferences(raw)


def _passthrough_decoder(model: type[BaseModel], name: str) -> _FieldDecoder:
    def decode(raw: Any, _current: Any, _strict: bool) -> tuple[Any, ...]:
        if raw is None:
            return ()
        if not isinstance(raw, list):
            msg = f"{name} must be a list, not {type(raw).__name__}"
            raise ParseError(msg)
        try:
            return tuple(model.model_validate(item) for item in raw)
        except ValidationError as exc:
            msg = f"invalid {name}: {exc.error_count()} validation error(s)"
            raise ParseError(msg) from exc

    return decode


_FIELD_DECODERS: dict[str, _FieldDecoder] = {
    FIELD_RANGE_MIN_BYTES: _int_decoder(_STRICT_INT64, FIELD_RANGE_MIN_BYTES),
    FIELD_RANGE_MAX_BYTES: _int_decoder(_STRICT_INT64, FIELD_RANGE_MAX_BYTES),
    FIELD_GC: _decode_gc,
    FIELD_NUM_REPLICAS: _int_decoder(_STRICT_INT32, FIELD_NUM_REPLICAS),
    FIELD_CONSTRAINTS: _decode_constraints,
    FIELD_LEASE_PREFERENCES: _decode_lease_preferences,
    FIELD_EXPERIMENTAL_LEASE_PREFERENCES: _decode_experimental_lease_preferences,
    FIELD_SUBZONES: _passthrough_decoder(Subzone, FIELD_SUBZONES),
    FIELD_SUBZONE_SPANS: _passthrough_decoder(SubzoneSpan, FIELD_SUBZONE_SPANS),
}


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def marshal_zone_config(cfg: ZoneConfig, *, include_subzones: bool = True) -> dict[str, Any]:
    """Produce the document value for *cfg*.

    Args:
        cfg: The configuration to encode.
        include_subzones: Emit ``subzones`` and ``subzone_spans``.  The
            YAML format leaves them out; JSON keeps them.
    """
    m = zone_config_to_marshalable(cfg)
    document: dict[str, Any] = {
        FIELD_RANGE_MIN_BYTES: m.range_min_bytes,
        FIELD_RANGE_MAX_BYTES: m.range_max_bytes,
        FIELD_GC: m.gc.model_dump(by_alias=True),
        FIELD_NUM_REPLICAS: m.num_replicas,
        FIELD_CONSTRAINTS: encode_constraints_list(m.constraints),
        FIELD_LEASE_PREFERENCES: encode_lease_preferences(m.lease_preferences),
    }
    if include_subzones:
        document[FIELD_SUBZONES] = [s.model_dump() for s in m.subzones]
        document[FIELD_SUBZONE_SPANS] = [s.model_dump() for s in m.subzone_spans]
    return document


def unknown_fields(document: Mapping[Any, Any], *, include_subzones: bool = True) -> list[str]:
    """Return the sorted keys of *document* that no field decoder claims."""
    unknown: list[str] = []
    for key in document:
        known = isinstance(key, str) and key in _FIELD_DECODERS
        if not known or (not include_subzones and key in SUBZONE_FIELDS):
            unknown.append(str(key))
    return sorted(unknown)


def unmarshal_zone_config(
    existing: ZoneConfig,
    document: Any,
    *,
    strict: bool = False,
    include_subzones: bool = True,
) -> ZoneConfig:
    """Apply *document* on top of *existing* and return the merged config.

    Fields absent from *document* keep their value from *existing*.  If the
    document carries ``experimental_lease_preferences`` it wins over
    ``lease_preferences``.

    Args:
        existing: Current value; seeds every field the document omits.
        document: Parsed document (a mapping, or ``None`` for empty).
        strict: Reject unknown keys instead of ignoring them.
        include_subzones: Accept ``subzones``/``subzone_spans`` keys.  When
            False they are treated as unknown keys.

    Raises:
        ParseError: If any field fails to decode.  Nothing is applied.
    """
    if document is None:
        document = {}
    if not isinstance(document, Mapping):
        msg = f"zone config document must be a mapping, not {type(document).__name__}"
        raise ParseError(msg)

    unknown = unknown_fields(document, include_subzones=include_subzones)
    if strict and unknown:
        msg = f"unknown zone config fields: {', '.join(unknown)}"
        raise ParseError(msg)

    aux = zone_config_to_marshalable(existing)
    updates: dict[str, Any] = {}
    for key, raw in document.items():
        if str(key) in unknown:
            continue
        updates[key] = _FIELD_DECODERS[key](raw, getattr(aux, key), strict)

    return zone_config_from_marshalable(aux.model_copy(update=updates))

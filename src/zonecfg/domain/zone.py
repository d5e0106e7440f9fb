"""Zone configuration model.

ZoneConfig is the in-memory value.  It never carries the deprecated
``experimental_lease_preferences`` field; that field only exists on the
transient marshalable form in :mod:`zonecfg.codec.zone`.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, Field

from zonecfg.domain.constraints import ConstraintGroup, LeasePreference

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]
Int64 = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]


class GCPolicy(BaseModel):
    """Garbage-collection policy, passed through untouched."""

    model_config = {"frozen": True, "populate_by_name": True, "extra": "forbid"}

    ttl_seconds: Int32 = Field(default=0, alias="ttlseconds")


class Subzone(BaseModel):
    """Per-index or per-partition override, opaque to the codecs."""

    model_config = {"frozen": True}

    index_id: int = Field(default=0, ge=0)
    partition_name: str = ""
    config: dict[str, Any] = Field(default_factory=dict)


class SubzoneSpan(BaseModel):
    """Key span mapped to a subzone, opaque to the codecs."""

    model_config = {"frozen": True}

    key: str = ""
    end_key: str = ""
    subzone_index: Int32 = 0


class ZoneConfig(BaseModel):
    """Replication and placement policy for a range of data.

    Attributes:
        range_min_bytes: Lower size threshold before ranges merge.
        range_max_bytes: Upper size threshold before ranges split.
        gc: Garbage-collection policy.
        num_replicas: Replication factor; zero means unset.
        constraints: Placement constraint groups.
        lease_preferences: Ordered preferences for lease placement.
        subzones: Index/partition overrides.
        subzone_spans: Key spans owned by each subzone.
    """

    model_config = {"frozen": True}

    range_min_bytes: Int64 = 0
    range_max_bytes: Int64 = 0
    gc: GCPolicy = Field(default_factory=GCPolicy)
    num_replicas: Int32 = 0
    constraints: tuple[ConstraintGroup, ...] = ()
    lease_preferences: tuple[LeasePreference, ...] = ()
    subzones: tuple[Subzone, ...] = ()
    subzone_spans: tuple[SubzoneSpan, ...] = ()

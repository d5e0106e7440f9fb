"""Tests for YAML/JSON text rendering and parsing."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tests.conftest import group, pref
from zonecfg.codec.documents import (
    dump_document,
    format_for_path,
    load_document,
    zone_config_from_text,
    zone_config_to_text,
)
from zonecfg.domain.errors import ParseError
from zonecfg.domain.zone import GCPolicy, Subzone, ZoneConfig

LEGACY_YAML = """\
range_max_bytes: 67108864
num_replicas: 3
constraints: [+region=us-east1, -ssd]
experimental_lease_preferences: [[+region=us-east1]]
"""

PER_REPLICA_YAML = """\
num_replicas: 3
constraints: {"+region=us-west1": 1, "+region=us-east1,-ssd": 2}
lease_preferences: [[+region=us-east1], [+region=us-west1]]
"""


@pytest.fixture
def cfg() -> ZoneConfig:
    return ZoneConfig(
        range_min_bytes=1 << 20,
        range_max_bytes=64 << 20,
        gc=GCPolicy(ttl_seconds=90000),
        num_replicas=3,
        constraints=(group("+region=us-east1", "-ssd"),),
        lease_preferences=(pref("+region=us-east1"),),
        subzones=(Subzone(index_id=1, partition_name="p0"),),
    )


class TestFormatForPath:
    @pytest.mark.parametrize(
        ("name", "fmt"),
        [("zone.yaml", "yaml"), ("zone.YML", "yaml"), ("zone.json", "json")],
    )
    def test_known_suffixes(self, name: str, fmt: str) -> None:
        assert format_for_path(Path(name)) == fmt

    def test_unknown_suffix(self) -> None:
        with pytest.raises(ValueError, match="zone.toml"):
            format_for_path(Path("zone.toml"))


class TestLoadDocument:
    def test_yaml(self) -> None:
        assert load_document("constraints: [+a, -b]\n", "yaml") == {"constraints": ["+a", "-b"]}

    def test_json(self) -> None:
        assert load_document('{"num_replicas": 3}', "json") == {"num_replicas": 3}

    def test_empty_text(self) -> None:
        assert load_document("", "yaml") is None
        assert load_document("  \n", "json") is None

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ParseError, match="Invalid YAML"):
            load_document("constraints: [+a\n", "yaml")

    def test_invalid_json(self) -> None:
        with pytest.raises(ParseError, match="Invalid JSON"):
            load_document("{num_replicas: 3}", "json")


class TestDumpDocument:
    def test_yaml_flow_style_for_constraints(self) -> None:
        text = dump_document({"num_replicas": 3, "constraints": ["+a", "-b"]}, "yaml")
        assert text == "num_replicas: 3\nconstraints: [+a, -b]\n"

    def test_yaml_block_style_for_gc(self) -> None:
        text = dump_document({"gc": {"ttlseconds": 600}}, "yaml")
        assert text == "gc:\n  ttlseconds: 600\n"

    def test_json(self) -> None:
        text = dump_document({"num_replicas": 3}, "json")
        assert json.loads(text) == {"num_replicas": 3}
        assert text.endswith("\n")


class TestZoneConfigText:
    def test_yaml_omits_subzones(self, cfg: ZoneConfig) -> None:
        text = zone_config_to_text(cfg, "yaml")
        assert "subzones" not in text
        assert "subzone_spans" not in text

    def test_json_keeps_subzones(self, cfg: ZoneConfig) -> None:
        doc = json.loads(zone_config_to_text(cfg, "json"))
        assert doc["subzones"][0]["partition_name"] == "p0"
        assert doc["subzone_spans"] == []

    def test_yaml_round_trip(self, cfg: ZoneConfig) -> None:
        decoded = zone_config_from_text(zone_config_to_text(cfg, "yaml"), "yaml")
        assert decoded == cfg.model_copy(update={"subzones": ()})

    def test_json_round_trip(self, cfg: ZoneConfig) -> None:
        assert zone_config_from_text(zone_config_to_text(cfg, "json"), "json") == cfg

    def test_yaml_keeps_existing_subzones(self, cfg: ZoneConfig) -> None:
        decoded = zone_config_from_text("num_replicas: 5\n", "yaml", existing=cfg)
        assert decoded.num_replicas == 5
        assert decoded.subzones == cfg.subzones

    def test_legacy_document_is_rewritten(self) -> None:
        cfg = zone_config_from_text(LEGACY_YAML, "yaml")
        assert cfg.constraints == (group("+region=us-east1", "-ssd"),)
        assert cfg.lease_preferences == (pref("+region=us-east1"),)

        text = zone_config_to_text(cfg, "yaml")
        assert "experimental_lease_preferences" not in text
        assert "constraints: [+region=us-east1, -ssd]" in text
        assert zone_config_from_text(text, "yaml") == cfg

    def test_per_replica_document(self) -> None:
        cfg = zone_config_from_text(PER_REPLICA_YAML, "yaml")
        assert cfg.constraints == (
            group("+region=us-east1", "-ssd", num_replicas=2),
            group("+region=us-west1", num_replicas=1),
        )
        assert cfg.lease_preferences == (pref("+region=us-east1"), pref("+region=us-west1"))
        assert zone_config_from_text(zone_config_to_text(cfg, "yaml"), "yaml") == cfg

    def test_reordered_documents_render_identically(self) -> None:
        reordered = PER_REPLICA_YAML.replace(
            '{"+region=us-west1": 1, "+region=us-east1,-ssd": 2}',
            '{"+region=us-east1,-ssd": 2, "+region=us-west1": 1}',
        )
        first = zone_config_to_text(zone_config_from_text(PER_REPLICA_YAML, "yaml"), "yaml")
        second = zone_config_to_text(zone_config_from_text(reordered, "yaml"), "yaml")
        assert first == second

    def test_strict_unknown_key(self) -> None:
        with pytest.raises(ParseError):
            zone_config_from_text("num_replicas: 3\nreplicas: 3\n", "yaml", strict=True)

    def test_malformed_token(self) -> None:
        with pytest.raises(ParseError):
            zone_config_from_text('constraints: ["not-a-valid-constraint!!"]\n', "yaml")

    def test_numeric_attribute(self) -> None:
        cfg = zone_config_from_text("constraints: [ssd, 1]\nlease_preferences: [[2]]\n", "yaml")
        assert cfg.constraints == (group("ssd", "1"),)
        assert cfg.lease_preferences == (pref("2"),)
        assert zone_config_from_text(zone_config_to_text(cfg, "yaml"), "yaml") == cfg

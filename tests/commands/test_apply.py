"""Tests for the apply CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from zonecfg.cli import cli

BASE_YAML = """\
range_min_bytes: 1048576
range_max_bytes: 67108864
gc:
  ttlseconds: 90000
num_replicas: 3
constraints: [+ssd]
lease_preferences: []
"""


@pytest.mark.usefixtures("workdir")
class TestApplyCommand:
    def test_merge_to_stdout(self, cli_runner: CliRunner) -> None:
        Path("zone.yaml").write_text(BASE_YAML)
        Path("patch.yaml").write_text('constraints: {"+region=us-east1": 2, "+ssd": 1}\n')
        result = cli_runner.invoke(cli, ["apply", "zone.yaml", "patch.yaml", "--format", "json"])
        assert result.exit_code == 0
        doc = json.loads(result.stdout)
        assert doc["num_replicas"] == 3
        assert doc["gc"] == {"ttlseconds": 90000}
        assert doc["constraints"] == {"+region=us-east1": 2, "+ssd": 1}
        assert Path("zone.yaml").read_text() == BASE_YAML

    def test_write(self, cli_runner: CliRunner) -> None:
        Path("zone.yaml").write_text(BASE_YAML)
        Path("patch.json").write_text('{"num_replicas": 7}')
        result = cli_runner.invoke(cli, ["--json", "apply", "zone.yaml", "patch.json", "--write"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["data"]["written"] is True
        text = Path("zone.yaml").read_text()
        assert "num_replicas: 7" in text
        assert "constraints: [+ssd]" in text

    def test_null_resets_field(self, cli_runner: CliRunner) -> None:
        Path("zone.yaml").write_text(BASE_YAML)
        Path("patch.yaml").write_text("gc: null\n")
        result = cli_runner.invoke(cli, ["apply", "zone.yaml", "patch.yaml", "--format", "json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["gc"] == {"ttlseconds": 0}

    def test_bad_patch(self, cli_runner: CliRunner) -> None:
        Path("zone.yaml").write_text(BASE_YAML)
        Path("patch.yaml").write_text("num_replicas: three\n")
        result = cli_runner.invoke(cli, ["apply", "zone.yaml", "patch.yaml", "--write"])
        assert result.exit_code == 1
        assert "num_replicas" in result.stderr
        assert Path("zone.yaml").read_text() == BASE_YAML

"""Shared pytest fixtures and builders for zonecfg tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from zonecfg.config.settings import ZoneCfgSettings
from zonecfg.domain.constraints import Constraint, ConstraintGroup, LeasePreference
from zonecfg.services.telemetry import disable_telemetry
from zonecfg.services.zone import ZoneConfigService


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's ZONECFG_* environment out of the tests."""
    monkeypatch.delenv("ZONECFG_CONFIG", raising=False)
    monkeypatch.delenv("ZONECFG_OUTPUT__FORMAT", raising=False)
    monkeypatch.delenv("ZONECFG_DECODE__STRICT", raising=False)


@pytest.fixture(autouse=True)
def _telemetry_off() -> Iterator[None]:
    """--verbose turns telemetry on for the rest of the process."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary working directory the CLI runs in."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings(tmp_path: Path) -> ZoneCfgSettings:
    return ZoneCfgSettings.from_cli(start_dir=tmp_path)


@pytest.fixture
def service(settings: ZoneCfgSettings) -> ZoneConfigService:
    return ZoneConfigService(settings)


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a document file under tmp_path and return its path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def group(*shorts: str, num_replicas: int = 0) -> ConstraintGroup:
    """Build a ConstraintGroup from short constraint strings."""
    return ConstraintGroup(
        constraints=tuple(Constraint.from_string(s) for s in shorts),
        num_replicas=num_replicas,
    )


def pref(*shorts: str) -> LeasePreference:
    """Build a LeasePreference from short constraint strings."""
    return LeasePreference(constraints=tuple(Constraint.from_string(s) for s in shorts))

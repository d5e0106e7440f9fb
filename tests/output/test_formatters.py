"""Tests for result formatting."""

from __future__ import annotations

import json

from zonecfg.output.console import create_console, get_output
from zonecfg.output.formatters import OutputSettings, format_result, format_warnings
from zonecfg.services.result import ErrorCode, ServiceResult


class TestConsole:
    def test_renders_into_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("[zonecfg.ok]OK[/]")
        assert get_output(console) == "OK\n"


class TestFormatResult:
    def test_document_printed_verbatim(self) -> None:
        result = ServiceResult(
            ok=True, op="normalize", data={"format": "yaml", "document": "num_replicas: 3\n"}
        )
        assert format_result(result) == "num_replicas: 3"

    def test_summary_lines(self) -> None:
        result = ServiceResult(
            ok=True, op="inspect", data={"num_replicas": 3, "constraints_shape": "legacy"}
        )
        text = format_result(result)
        assert text.splitlines() == [
            "OK: inspect",
            "  num_replicas: 3",
            "  constraints_shape: legacy",
        ]

    def test_quiet_hides_data(self) -> None:
        result = ServiceResult(ok=True, op="inspect", data={"num_replicas": 3})
        assert format_result(result, settings=OutputSettings(quiet=True)) == "OK: inspect"

    def test_verbose_duration(self) -> None:
        result = ServiceResult(
            ok=True,
            op="inspect",
            data={},
            meta={"telemetry": {"name": "inspect", "duration_ms": 1.5}},
        )
        text = format_result(result, settings=OutputSettings(verbose=True))
        assert "duration_ms: 1.5" in text

    def test_error(self) -> None:
        result = ServiceResult.failure("apply", ErrorCode.PARSE_ERROR, "bad [token]")
        assert format_result(result) == "ERROR: apply - bad [token]"

    def test_json(self) -> None:
        result = ServiceResult(
            ok=True, op="normalize", data={"document": "{}"}, warnings=["x: ignored"]
        )
        data = json.loads(format_result(result, settings=OutputSettings(json_output=True)))
        assert data["ok"] is True
        assert data["data"]["document"] == "{}"
        assert data["warnings"] == ["x: ignored"]

    def test_json_error_code(self) -> None:
        result = ServiceResult.failure("inspect", ErrorCode.FILE_NOT_FOUND, "gone", path="z.yaml")
        data = json.loads(format_result(result, settings=OutputSettings(json_output=True)))
        assert data["error"] == {
            "code": "FILE_NOT_FOUND",
            "message": "gone",
            "detail": {"path": "z.yaml"},
        }


class TestFormatWarnings:
    def test_one_line_each(self) -> None:
        text = format_warnings(["a.yaml: ignored unknown field 'x'", "b.yaml: [sic]"])
        assert text.splitlines() == [
            "WARNING: a.yaml: ignored unknown field 'x'",
            "WARNING: b.yaml: [sic]",
        ]

    def test_long_lines_not_wrapped(self) -> None:
        long = "z.yaml: " + "x" * 300
        assert format_warnings([long]) == f"WARNING: {long}"

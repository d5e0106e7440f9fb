"""ZoneConfigService: file-level normalize, apply and inspect.

All document I/O happens here; the codecs below stay pure.  Every public
method returns a ServiceResult, converting ParseError and filesystem
errors into structured failures.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from zonecfg.codec.constraints import uses_legacy_shape
from zonecfg.codec.documents import (
    DocumentFormat,
    format_for_path,
    load_document,
    zone_config_to_text,
)
from zonecfg.codec.zone import (
    FIELD_EXPERIMENTAL_LEASE_PREFERENCES,
    unknown_fields,
    unmarshal_zone_config,
)
from zonecfg.domain.errors import ParseError
from zonecfg.domain.zone import ZoneConfig
from zonecfg.services.result import ErrorCode, ServiceResult
from zonecfg.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from zonecfg.config.settings import ZoneCfgSettings

log = structlog.get_logger(__name__)


class _LoadFailed(Exception):
    """Carries a ready-made failure result out of a helper."""

    def __init__(self, result: ServiceResult) -> None:
        super().__init__(result.error.message if result.error else result.op)
        self.result = result


class ZoneConfigService:
    """Read, merge and re-emit zone configuration documents.

    Usage::

        svc = ZoneConfigService(settings)
        result = svc.apply(Path("zone.yaml"), Path("patch.yaml"))
        print(result.data["document"])
    """

    def __init__(self, settings: ZoneCfgSettings) -> None:
        self._settings = settings

    @property
    def strict(self) -> bool:
        return self._settings.decode.strict

    def _output_format(self, requested: DocumentFormat | None) -> DocumentFormat:
        return requested or self._settings.output.format

    def _decode_file(
        self,
        op: str,
        path: Path,
        existing: ZoneConfig,
        warnings: list[str],
    ) -> ZoneConfig:
        """Read *path* and apply it on top of *existing*.

        Raises:
            _LoadFailed: With the ServiceResult to return to the caller.
        """
        try:
            fmt = format_for_path(path)
        except ValueError as exc:
            raise _LoadFailed(
                ServiceResult.failure(op, ErrorCode.INVALID_FORMAT, str(exc), path=str(path))
            ) from exc

        with trace_span("read"):
            try:
                text = path.read_text(encoding="utf-8")
            except FileNotFoundError as exc:
                raise _LoadFailed(
                    ServiceResult.failure(
                        op, ErrorCode.FILE_NOT_FOUND, f"No such file: {path}", path=str(path)
                    )
                ) from exc
            except UnicodeDecodeError as exc:
                raise _LoadFailed(
                    ServiceResult.failure(
                        op, ErrorCode.PARSE_ERROR, f"{path} is not UTF-8: {exc}", path=str(path)
                    )
                ) from exc
            except OSError as exc:
                raise _LoadFailed(
                    ServiceResult.failure(
                        op, ErrorCode.READ_FAILED, f"Cannot read {path}: {exc}", path=str(path)
                    )
                ) from exc

        with trace_span("decode") as span:
            try:
                document = load_document(text, fmt)
                cfg = unmarshal_zone_config(
                    existing,
                    document,
                    strict=self.strict,
                    include_subzones=fmt == "json",
                )
            except ParseError as exc:
                log.debug("decode.failed", path=str(path), error=str(exc))
                raise _LoadFailed(
                    ServiceResult.failure(op, ErrorCode.PARSE_ERROR, str(exc), path=str(path))
                ) from exc
            if span:
                span.annotate("format", fmt)

        if isinstance(document, Mapping):
            warnings.extend(self._document_warnings(path, document, fmt))
        return cfg

    @staticmethod
    def _document_warnings(
        path: Path, document: Mapping[Any, Any], fmt: DocumentFormat
    ) -> list[str]:
        warnings: list[str] = []
        for key in unknown_fields(document, include_subzones=fmt == "json"):
            warnings.append(f"{path.name}: ignored unknown field {key!r}")
        if FIELD_EXPERIMENTAL_LEASE_PREFERENCES in document:
            log.info("decode.deprecated_field", path=str(path))
            warnings.append(
                f"{path.name}: {FIELD_EXPERIMENTAL_LEASE_PREFERENCES} is deprecated; "
                "it is written back as lease_preferences"
            )
        return warnings

    def _render(self, cfg: ZoneConfig, fmt: DocumentFormat) -> str:
        with trace_span("encode"):
            return zone_config_to_text(cfg, fmt)

    @traced
    def normalize(
        self, path: Path, *, output_format: DocumentFormat | None = None
    ) -> ServiceResult:
        """Decode *path* and re-emit it in canonical form."""
        op = "normalize"
        warnings: list[str] = []
        try:
            cfg = self._decode_file(op, path, ZoneConfig(), warnings)
        except _LoadFailed as failed:
            return failed.result

        fmt = self._output_format(output_format)
        log.debug("normalize.done", path=str(path), format=fmt)
        return ServiceResult(
            ok=True,
            op=op,
            data={"path": str(path), "format": fmt, "document": self._render(cfg, fmt)},
            warnings=warnings,
        )

    @traced
    def apply(
        self,
        base_path: Path,
        patch_path: Path,
        *,
        output_format: DocumentFormat | None = None,
        write: bool = False,
    ) -> ServiceResult:
        """Apply the document at *patch_path* on top of *base_path*.

        Fields the patch omits keep their value from the base.  With
        *write*, the merged document replaces *base_path* in the base
        file's own format.
        """
        op = "apply"
        warnings: list[str] = []
        try:
            base = self._decode_file(op, base_path, ZoneConfig(), warnings)
            merged = self._decode_file(op, patch_path, base, warnings)
        except _LoadFailed as failed:
            return failed.result

        fmt = format_for_path(base_path) if write else self._output_format(output_format)
        document = self._render(merged, fmt)

        if write:
            try:
                base_path.write_text(document, encoding="utf-8")
            except OSError as exc:
                return ServiceResult.failure(
                    op,
                    ErrorCode.WRITE_FAILED,
                    f"Cannot write {base_path}: {exc}",
                    path=str(base_path),
                )
            log.info("apply.written", path=str(base_path), patch=str(patch_path))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(base_path),
                "patch": str(patch_path),
                "format": fmt,
                "document": document,
                "written": write,
            },
            warnings=warnings,
        )

    @traced
    def inspect(self, path: Path) -> ServiceResult:
        """Summarize the decoded structure of *path*."""
        op = "inspect"
        warnings: list[str] = []
        try:
            cfg = self._decode_file(op, path, ZoneConfig(), warnings)
        except _LoadFailed as failed:
            return failed.result

        shape = "legacy" if uses_legacy_shape(cfg.constraints) else "per_replica"
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(path),
                "num_replicas": cfg.num_replicas,
                "constraint_groups": len(cfg.constraints),
                "constraints_shape": shape,
                "lease_preferences": len(cfg.lease_preferences),
                "subzones": len(cfg.subzones),
            },
            warnings=warnings,
        )

"""ServiceResult and ServiceError: the contract between services and the CLI.

INVARIANT: Every ZoneConfigService method returns a ServiceResult.
ParseError and file errors are converted here; they never reach the CLI
as exceptions.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Stable error codes surfaced in ``ServiceError.code``."""

    PARSE_ERROR = "PARSE_ERROR"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    INVALID_FORMAT = "INVALID_FORMAT"
    READ_FAILED = "READ_FAILED"
    WRITE_FAILED = "WRITE_FAILED"


class ServiceError(BaseModel):
    """Why an operation failed."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type of every service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name (``"normalize"``, ``"apply"``, ``"inspect"``).
        data: Operation payload on success, e.g. the rendered document.
        warnings: Non-fatal issues, e.g. ignored unknown keys.
        error: Populated when ``ok`` is False.
        meta: Telemetry and other side-channel data.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
        """Build a failed result for *op*."""
        error = ServiceError(code=str(code), message=message, detail=detail)
        return cls(ok=False, op=op, error=error)

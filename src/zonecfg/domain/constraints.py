"""Placement constraints, constraint groups, and lease preferences.

A constraint's canonical short form is ``[+|-](key=)value``:

- ``+region=us-east1`` - replicas REQUIRED to carry the attribute.
- ``-ssd`` - replicas PROHIBITED from carrying the attribute.
- ``ssd`` - the pre-grouping positive form (DEPRECATED_POSITIVE).

Two constraints are equal exactly when their canonical strings are equal.
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Any, NoReturn

from pydantic import BaseModel, Field

from zonecfg.domain.errors import MarshalMisuseError, ParseError

# Keys and values are restricted to a conservative attribute alphabet so
# that "," (group separator) and "=" (key separator) never appear inside.
_TOKEN_PART = re.compile(r"[A-Za-z0-9_.:/\-]+")


class ConstraintType(StrEnum):
    """How a constraint restricts replica placement."""

    DEPRECATED_POSITIVE = "deprecated_positive"
    REQUIRED = "required"
    PROHIBITED = "prohibited"


_PREFIXES: dict[ConstraintType, str] = {
    ConstraintType.DEPRECATED_POSITIVE: "",
    ConstraintType.REQUIRED: "+",
    ConstraintType.PROHIBITED: "-",
}


class Constraint(BaseModel):
    """A single placement directive."""

    model_config = {"frozen": True}

    type: ConstraintType = ConstraintType.DEPRECATED_POSITIVE
    key: str = ""
    value: str

    def __str__(self) -> str:
        prefix = _PREFIXES[self.type]
        if self.key:
            return f"{prefix}{self.key}={self.value}"
        return f"{prefix}{self.value}"

    @classmethod
    def from_string(cls, short: str) -> Constraint:
        """Parse the canonical short form.

        Raises:
            ParseError: If *short* is empty or not of the form
                ``[+|-](key=)value``.
        """
        if not isinstance(short, str):
            msg = f"constraint must be a string, not {type(short).__name__}"
            raise ParseError(msg)
        if not short:
            msg = "the empty string is not a valid constraint"
            raise ParseError(msg)

        constraint_type = ConstraintType.DEPRECATED_POSITIVE
        body = short
        if short[0] == "+":
            constraint_type = ConstraintType.REQUIRED
            body = short[1:]
        elif short[0] == "-":
            constraint_type = ConstraintType.PROHIBITED
            body = short[1:]

        parts = body.split("=")
        if len(parts) == 1:
            key, value = "", parts[0]
        elif len(parts) == 2:
            key, value = parts
            if not _TOKEN_PART.fullmatch(key):
                msg = f"invalid constraint key {key!r} in {short!r}"
                raise ParseError(msg)
        else:
            msg = f'constraint needs to be in the form "(key=)value", not {short!r}'
            raise ParseError(msg)

        if not _TOKEN_PART.fullmatch(value):
            msg = f"invalid constraint value {value!r} in {short!r}"
            raise ParseError(msg)

        return cls(type=constraint_type, key=key, value=value)


def _reject_document_call(what: str) -> NoReturn:
    msg = (
        f"{what} should never be called directly on ConstraintGroup; "
        "encode or decode the enclosing constraints list instead"
    )
    raise MarshalMisuseError(msg)


class ConstraintGroup(BaseModel):
    """Constraints that apply to ``num_replicas`` replicas.

    ``num_replicas == 0`` means the constraints apply to every replica.
    """

    model_config = {"frozen": True}

    constraints: tuple[Constraint, ...] = ()
    num_replicas: int = Field(default=0, ge=0)

    def constraint_strings(self) -> list[str]:
        """Canonical strings of the member constraints, in order."""
        return [str(c) for c in self.constraints]

    # A lone group has no unambiguous document shape; only a list of
    # groups does (see zonecfg.codec.constraints).

    def to_document(self) -> Any:
        _reject_document_call("to_document")

    @classmethod
    def from_document(cls, document: Any) -> ConstraintGroup:
        _reject_document_call("from_document")


class LeasePreference(BaseModel):
    """An ordered list of constraints describing where leases should live."""

    model_config = {"frozen": True}

    constraints: tuple[Constraint, ...] = ()

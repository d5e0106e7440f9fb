"""Lease-preference document codec.

Each preference is a flat list of constraint short strings.  Order is
significant and kept exactly: no sorting, no deduplication.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from zonecfg.codec.constraints import scalar_token
from zonecfg.domain.constraints import Constraint, LeasePreference
from zonecfg.domain.errors import ParseError


def encode_lease_preference(preference: LeasePreference) -> list[str]:
    """Produce the document value for one lease preference."""
    return [str(c) for c in preference.constraints]


def decode_lease_preference(document: Any) -> LeasePreference:
    """Decode one lease preference from a list of short strings.

    Raises:
        ParseError: If *document* is not a list or holds an invalid token.
    """
    if document is None:
        return LeasePreference()
    if not isinstance(document, list):
        msg = f"lease preference must be a list, not {type(document).__name__}"
        raise ParseError(msg)
    constraints = tuple(Constraint.from_string(scalar_token(s)) for s in document)
    return LeasePreference(constraints=constraints)


def encode_lease_preferences(preferences: Sequence[LeasePreference]) -> list[list[str]]:
    return [encode_lease_preference(p) for p in preferences]


def decode_lease_preferences(document: Any) -> tuple[LeasePreference, ...]:
    """Decode the enclosing list of lease preferences."""
    if document is None:
        return ()
    if not isinstance(document, list):
        msg = f"lease preferences must be a list, not {type(document).__name__}"
        raise ParseError(msg)
    return tuple(decode_lease_preference(item) for item in document)

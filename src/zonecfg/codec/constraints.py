"""Constraint-list document codec.

Two document shapes are in use, depending on whether per-replica
constraints are in play:

1. Legacy shape, when there are 0 groups, or 1 group with
   ``num_replicas == 0``::

       [c1, c2, c3]

2. Per-replica shape otherwise::

       {"c1,c2,c3": num_replicas1, "c4,c5": num_replicas2}

Decoding accepts both.  A bare list is always the legacy shape.  Groups
decoded from the per-replica shape are sorted so that reordered but
otherwise identical documents decode to identical lists.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping, Sequence
from typing import Any

from zonecfg.domain.constraints import Constraint, ConstraintGroup
from zonecfg.domain.errors import ParseError
from zonecfg.domain.zone import INT32_MAX

GROUP_SEPARATOR = ","


def scalar_token(raw: Any) -> Any:
    """Read a bare integer scalar as its decimal text.

    Older documents carry numeric attributes such as ``[ssd, 1]``.  Other
    types are returned unchanged so Constraint.from_string rejects them.
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        return str(raw)
    return raw


# ---------------------------------------------------------------------------
# Group codec
# ---------------------------------------------------------------------------


def group_to_key(group: ConstraintGroup) -> str:
    """Join a group's canonical constraint strings into a mapping key."""
    return GROUP_SEPARATOR.join(group.constraint_strings())


def group_from_key(key: str, num_replicas: int) -> ConstraintGroup:
    """Split a mapping key back into a group.

    Raises:
        ParseError: On the first token that is not a valid constraint.
    """
    constraints = tuple(Constraint.from_string(short) for short in key.split(GROUP_SEPARATOR))
    return ConstraintGroup(constraints=constraints, num_replicas=num_replicas)


# ---------------------------------------------------------------------------
# Canonical ordering
# ---------------------------------------------------------------------------


def constraint_group_less(left: ConstraintGroup, right: ConstraintGroup) -> bool:
    """Report whether *left* sorts before *right*.

    Groups compare by their constraint strings index by index; a group
    that runs out first is lesser; identical constraint lists fall back to
    ``num_replicas``.
    """
    right_strs = right.constraint_strings()
    for k, left_str in enumerate(left.constraint_strings()):
        if k >= len(right_strs):
            return False
        right_str = right_strs[k]
        if left_str < right_str:
            return True
        if left_str > right_str:
            return False
    if len(left.constraints) < len(right.constraints):
        return True
    return left.num_replicas < right.num_replicas


def _compare_groups(left: ConstraintGroup, right: ConstraintGroup) -> int:
    if constraint_group_less(left, right):
        return -1
    if constraint_group_less(right, left):
        return 1
    return 0


def sort_constraint_groups(groups: Sequence[ConstraintGroup]) -> list[ConstraintGroup]:
    """Return *groups* in canonical order."""
    return sorted(groups, key=functools.cmp_to_key(_compare_groups))


# ---------------------------------------------------------------------------
# List codec
# ---------------------------------------------------------------------------


def uses_legacy_shape(groups: Sequence[ConstraintGroup]) -> bool:
    """Report whether *groups* encode to the flat-list shape."""
    return not groups or (len(groups) == 1 and groups[0].num_replicas == 0)


def encode_constraints_list(groups: Sequence[ConstraintGroup]) -> list[str] | dict[str, int]:
    """Produce the document value for a list of constraint groups.

    Distinct groups that join to the same key collapse into one entry;
    the later group wins.
    """
    # Without per-replica constraints, stay compatible with pre-grouping
    # documents.
    if uses_legacy_shape(groups):
        return groups[0].constraint_strings() if groups else []

    constraints_map: dict[str, int] = {}
    for group in groups:
        constraints_map[group_to_key(group)] = group.num_replicas
    return constraints_map


def _decode_legacy_list(items: list[Any]) -> tuple[ConstraintGroup, ...]:
    constraints = tuple(Constraint.from_string(scalar_token(short)) for short in items)
    if not constraints:
        return ()
    return (ConstraintGroup(constraints=constraints, num_replicas=0),)


def _decode_num_replicas(key: str, raw: Any) -> int:
    # bool is an int subclass but never a replica count.
    if isinstance(raw, bool) or not isinstance(raw, int):
        msg = f"replica count for {key!r} must be an integer, not {raw!r}"
        raise ParseError(msg)
    if raw < 0 or raw > INT32_MAX:
        msg = f"replica count for {key!r} out of range: {raw}"
        raise ParseError(msg)
    return raw


def _decode_per_replica_map(mapping: Mapping[Any, Any]) -> tuple[ConstraintGroup, ...]:
    groups: list[ConstraintGroup] = []
    for raw_key, raw in mapping.items():
        key = scalar_token(raw_key)
        if not isinstance(key, str):
            msg = f"constraints key must be a string, not {key!r}"
            raise ParseError(msg)
        groups.append(group_from_key(key, _decode_num_replicas(key, raw)))
    return tuple(sort_constraint_groups(groups))


def decode_constraints_list(document: Any) -> tuple[ConstraintGroup, ...]:
    """Decode either document shape into constraint groups.

    Raises:
        ParseError: If any token is invalid or *document* is neither a
            list nor a mapping.
    """
    if document is None:
        return ()
    # A list is always the legacy shape; errors inside it propagate
    # instead of falling through to the mapping shape.
    if isinstance(document, list):
        return _decode_legacy_list(document)
    if isinstance(document, Mapping):
        return _decode_per_replica_map(document)
    msg = f"constraints must be a list or a mapping, not {type(document).__name__}"
    raise ParseError(msg)

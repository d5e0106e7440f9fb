"""Error taxonomy for zone configuration documents.

Two kinds of failure surface to callers:

- :class:`ParseError` - a constraint token, field value, or document shape
  could not be interpreted.  Always fatal to the enclosing decode.
- :class:`MarshalMisuseError` - a programmer error: a list-level document
  operation was invoked on a single constraint group.
"""

from __future__ import annotations


class ZoneConfigError(Exception):
    """Base class for all zonecfg errors."""


class ParseError(ZoneConfigError, ValueError):
    """A document or constraint token could not be decoded."""


class MarshalMisuseError(ZoneConfigError, TypeError):
    """A document operation was invoked on a value that has no document shape."""

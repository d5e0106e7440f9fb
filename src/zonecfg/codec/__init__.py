"""Document codecs: plain document values to and from domain models.

Codecs operate on already-parsed values (``list``, ``dict``, ``str``,
``int``, ``None``).  Text parsing and rendering live in
:mod:`zonecfg.codec.documents`.
"""

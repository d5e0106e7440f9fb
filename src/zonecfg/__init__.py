"""zonecfg: backward-compatible zone configuration documents."""

__version__ = "0.3.0"

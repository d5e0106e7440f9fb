"""Domain layer: constraints, zone configuration, and errors.

This layer depends only on stdlib and pydantic.
It must never import from codec, services, commands, or config.
"""

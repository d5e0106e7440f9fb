"""Service layer: file-level operations returning ServiceResult.

Services may import from domain and codec layers.
They must never import from commands or output.
"""

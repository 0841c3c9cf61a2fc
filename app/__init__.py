"""Workshop operations API package."""

__all__ = []

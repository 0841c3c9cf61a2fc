"""Packaged configuration data (exercise catalog)."""

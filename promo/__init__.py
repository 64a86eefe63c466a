"""Promote build artifacts into a shared downstream git repository."""

__version__ = "0.4.0"

"""Minicast developer verification and app approval engine."""

__version__ = "0.4.0"

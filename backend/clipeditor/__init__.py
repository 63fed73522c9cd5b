"""Clip path editor: bezier path geometry and direct-manipulation engine."""

__version__ = "0.1.0"

"""Plait: flatten markdown workflows into a resumable task list."""

__version__ = "0.1.0"

"""Command line entry point (``python -m shipclip.cli``)."""

from .__main__ import main

__all__ = [
    "main",
]

"""Command-line interface for the string detector."""

from .main import main

__all__ = ["main"]

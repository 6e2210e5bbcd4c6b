"""Presentation layer."""

from .cli import ChatCLI

__all__ = ["ChatCLI"]

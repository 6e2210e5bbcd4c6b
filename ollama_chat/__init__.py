"""Ollama Chat - a small web chat service in front of a local Ollama server."""

__version__ = "0.1.0"

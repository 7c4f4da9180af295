# src/__init__.py — v1
"""ollamacopilot: inline code completions from a local Ollama model."""

from ollamacopilot.version import __version__

__all__ = ["__version__"]

# src/llm/__init__.py — v1
"""Model client boundary."""

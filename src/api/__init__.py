# src/api/__init__.py — v1
"""Public commands and one-shot helpers."""

# src/postproc/__init__.py — v1
"""Model response normalization and deduplication."""

# src/cache/__init__.py — v1
"""Completion cache, key derivation and invalidation."""

# src/core/__init__.py — v1
"""Shared domain types and editor boundaries."""

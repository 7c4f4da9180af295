# src/completion/__init__.py — v1
"""Completion request orchestration."""

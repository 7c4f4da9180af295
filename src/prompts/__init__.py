# src/prompts/__init__.py — v1
"""Prompt template dispatch."""

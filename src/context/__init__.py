# src/context/__init__.py — v1
"""Lexical context classification around the cursor."""

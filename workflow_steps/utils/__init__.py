"""Presentation helpers."""

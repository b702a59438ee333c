"""Variation operators grouped by encoding."""

"""Prompt text and static lookup tables."""

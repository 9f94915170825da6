"""Synthetic lead generation pipeline."""

__version__ = "1.0.0"

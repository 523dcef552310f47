"""Deterministic merge-and-patch pipeline for story content mods."""

__version__ = "0.1.0"

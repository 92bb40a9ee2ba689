"""Heuristic autoplay agent for a falling-block puzzle game."""

__version__ = "0.1.0"

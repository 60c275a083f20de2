"""Reactive move engine for a Battlesnake-style agent."""

__version__ = "0.3.0"

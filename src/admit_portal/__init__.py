"""Admit Portal - registration applications and admit cards."""

__version__ = "0.1.0"

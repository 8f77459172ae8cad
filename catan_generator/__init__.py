"""Balanced board generation and shareable board tokens for Catan-style hex games."""

__version__ = "0.1.0"

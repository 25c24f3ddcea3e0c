"""Hierarchical parking pricing: inheritance resolution and dynamic rate computation."""

__version__ = "1.0.0"

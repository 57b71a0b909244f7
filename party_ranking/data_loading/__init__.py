"""Data loading module for party candidates, swipes and members."""

from .loaders import load_candidates, load_swipes, load_members

__all__ = ["load_candidates", "load_swipes", "load_members"]

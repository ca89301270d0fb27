"""Planar frame compositing."""

from .overlay import check_bounds, composite

__all__ = ["check_bounds", "composite"]

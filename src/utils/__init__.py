"""Utility helpers for groundwater outlook workflows."""

from .table_io import load_projection, save_projection

__all__ = [
    "load_projection",
    "save_projection",
]

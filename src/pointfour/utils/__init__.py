"""Utility modules for PointFour."""

from .data_prep import export_to_json, load_export, prepare_export

__all__ = [
    "export_to_json",
    "load_export",
    "prepare_export",
]

"""Utility helpers."""

from .graph_io import load_graph_from_json, save_graph_to_json

__all__ = ["load_graph_from_json", "save_graph_to_json"]

"""Utilities for loading and saving graphs from/to JSON files."""

from pathlib import Path
from pydantic import TypeAdapter
from er2sql.ir.graph import Graph


def load_graph_from_json(graph_path: Path) -> Graph:
    """
    Load a Graph from a JSON file.

    Args:
        graph_path: Path to the JSON file

    Returns:
        Loaded Graph instance

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or is not a valid graph
    """
    graph_path = Path(graph_path)
    if not graph_path.exists():
        raise FileNotFoundError(f"Graph file not found: {graph_path}")

    file_content = graph_path.read_text(encoding="utf-8").strip()
    if not file_content:
        raise ValueError(f"Graph file is empty: {graph_path}")

    try:
        return TypeAdapter(Graph).validate_json(file_content)
    except Exception as e:
        raise ValueError(f"Failed to load graph from {graph_path}: {e}") from e


def save_graph_to_json(graph: Graph, graph_path: Path) -> None:
    """
    Save a Graph to a JSON file.

    Note:
        Creates parent directories if they don't exist.
    """
    graph_path = Path(graph_path)
    graph_path.parent.mkdir(parents=True, exist_ok=True)
    graph_path.write_text(graph.model_dump_json(indent=2), encoding="utf-8")

"""Semantic validation of ER graphs."""

from .labels import check_label
from .validator import RULES, validate_graph

__all__ = ["RULES", "check_label", "validate_graph"]

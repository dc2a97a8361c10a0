"""Diagnostics reported by the semantic validator."""

from dataclasses import dataclass
from typing import Literal

Severity = Literal["error", "warning", "info"]


@dataclass(frozen=True)
class Diagnostic:
    """One finding against a graph element."""

    severity: Severity
    element_id: str
    description: str
    short_label: str  # e.g., "entity-isolated", "relation-arity"

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


def error(element_id: str, short_label: str, description: str) -> Diagnostic:
    return Diagnostic("error", element_id, description, short_label)


def warning(element_id: str, short_label: str, description: str) -> Diagnostic:
    return Diagnostic("warning", element_id, description, short_label)


def has_errors(diagnostics) -> bool:
    """Return True if any diagnostic blocks compilation."""
    return any(d.is_error for d in diagnostics)

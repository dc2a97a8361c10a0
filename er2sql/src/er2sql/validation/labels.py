"""Label format checks (cardinalities, attribute types, equations, names)."""

import re
from typing import List, Optional

from er2sql.ir.diagnostics import Diagnostic, warning
from er2sql.ir.graph import ATTRIBUTE_KINDS
from er2sql.query.index import GraphIndex
from er2sql.query.traversal import attribute_children_of

WEIGHT_PATTERN = re.compile(r"^\([0-9]+\.\.([0-9]+|N)\)$")
EQUATION_PATTERN = re.compile(r"^[a-zA-Z0-9_\s+\-*/().]+$")

ALLOWED_TYPES = [
    r"integer",
    r"smallint",
    r"bigint",
    r"tinyint",
    r"decimal\(\s*\d+\s*,\s*\d+\s*\)",
    r"numeric\(\s*\d+\s*,\s*\d+\s*\)",
    r"float",
    r"real",
    r"varchar\(\s*\d+\s*\)",
    r"char\(\s*\d+\s*\)",
    r"text",
    r"date",
    r"time",
    r"datetime",
    r"timestamp",
    r"boolean",
    r"blob",
    r"binary",
    r"varbinary",
    r"json",
    r"xml",
    r"uuid",
    r"geometry",
    r"geography",
]
ATTRIBUTE_PATTERN = re.compile(rf"^[^:]+:\s*({'|'.join(ALLOWED_TYPES)})\s*$", re.IGNORECASE)


def check_label(kind: str, text: str) -> Optional[str]:
    """
    Vet label text before it is applied to an element.

    Args:
        kind: "weighted" for an edge cardinality, "equation" for a derived
            attribute formula, or a node kind for a name label
        text: Proposed label text

    Returns:
        An error message, or None if the text is acceptable
    """
    if kind == "weighted":
        if not WEIGHT_PATTERN.match(text):
            return "Cardinality must look like (1..N) or (0..1)"
        return None
    if kind == "equation":
        if not EQUATION_PATTERN.match(text):
            return "Equation may only use attribute names, numbers and the operators + - * / ( )"
        return None
    if kind in ATTRIBUTE_KINDS and not ATTRIBUTE_PATTERN.match(text):
        return "Attribute label must look like 'name: type' with a SQL type, e.g. 'age: integer'"
    return _check_name(text)


def _check_name(text: str) -> Optional[str]:
    if not text.strip() or (":" in text and not text.split(":", 1)[0].strip()):
        return "Name must not be empty"
    return None


def label_diagnostics(index: GraphIndex) -> List[Diagnostic]:
    """Warnings for every malformed label in the graph."""
    diagnostics: List[Diagnostic] = []
    for node in index.graph.nodes:
        if node.kind in ATTRIBUTE_KINDS and attribute_children_of(index, node):
            # Composite parents are flattened into their children and need no type
            message = _check_name(node.name)
        else:
            message = check_label(node.kind, node.name)
        if message:
            diagnostics.append(warning(node.id, f"{node.kind}-label", f"'{node.name}': {message}"))
        if node.kind == "derivedAttribute":
            if not node.equation:
                diagnostics.append(
                    warning(node.id, "derivedAttribute-no-equation", f"Derived attribute '{node.name}' has no equation")
                )
            else:
                message = check_label("equation", node.equation)
                if message:
                    diagnostics.append(warning(node.id, "derivedAttribute-equation", f"'{node.equation}': {message}"))

    for edge in index.graph.edges:
        if edge.kind == "weighted":
            message = check_label("weighted", edge.label)
            if message:
                diagnostics.append(warning(edge.id, "weighted-label", f"'{edge.label}': {message}"))
    return diagnostics

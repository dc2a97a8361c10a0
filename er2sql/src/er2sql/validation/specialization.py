"""Rules shared by the four specialization kinds."""

from typing import Optional

from er2sql.ir.diagnostics import Diagnostic, error
from er2sql.ir.graph import SPECIALIZATION_CONSTRAINT_EDGE_KINDS, Node
from er2sql.query.index import GraphIndex
from er2sql.query.traversal import (
    neighbors_of,
    specialization_children,
    specialization_parents,
)


def validate_specialization(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    neighbors = neighbors_of(index, node)
    if not neighbors:
        return error(
            node.id, "specialization-isolated", f"Specialization '{node.name}' is isolated: not connected to the model"
        )

    for other, edge in neighbors:
        if edge.kind in SPECIALIZATION_CONSTRAINT_EDGE_KINDS:
            continue
        if edge.kind != "transition":
            return error(
                node.id,
                "specialization-edge",
                f"Specialization '{node.name}' can only be linked with transitions",
            )
        if other.family != "entity":
            return error(
                node.id,
                "specialization-connection",
                f"Specialization '{node.name}' can only connect a parent entity to child entities",
            )

    parents = specialization_parents(index, node)
    children = specialization_children(index, node)
    if len(parents) + len(children) < 2:
        return error(
            node.id,
            "specialization-arity",
            f"Specialization '{node.name}' must connect at least two entities",
        )
    if not parents:
        return error(node.id, "specialization-no-parent", f"Specialization '{node.name}' has no parent entity")
    if len(parents) > 1:
        return error(node.id, "specialization-parents", f"Specialization '{node.name}' has more than one parent entity")
    for child in children:
        if child.kind == "weakEntity":
            return error(
                node.id,
                "specialization-weak-child",
                f"Specialization '{node.name}' cannot have weak entity '{child.name}' as a subclass",
            )
    return None

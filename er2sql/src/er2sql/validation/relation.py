"""Rules for relations and dependency relations."""

from typing import Optional

from er2sql.ir.diagnostics import Diagnostic, error
from er2sql.ir.graph import Node
from er2sql.query.index import GraphIndex
from er2sql.query.traversal import dependents_of, neighbors_of, owners_of, relation_cardinality


def validate_relation(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    """Check a plain relation; returns the first error found."""
    neighbors = neighbors_of(index, node)
    if not neighbors:
        return error(node.id, "relation-isolated", f"Relation '{node.name}' is isolated: not connected to the model")

    entity_links = 0
    for other, edge in neighbors:
        if other.family == "relation":
            return error(
                node.id,
                "relation-relation",
                f"Relation '{node.name}' cannot be connected to another relation or dependency",
            )
        if other.family == "specialization":
            return error(
                node.id, "relation-specialization", f"Relation '{node.name}' cannot be connected to a specialization"
            )
        if other.family == "entity":
            if edge.kind != "weighted":
                return error(
                    node.id,
                    "relation-weighted-edge",
                    f"Relation '{node.name}' is linked to '{other.name}' without a weighted edge",
                )
            entity_links += 1

    if entity_links < 2:
        return error(node.id, "relation-arity", f"Relation '{node.name}' must link at least two entities")
    if entity_links > 2 and relation_cardinality(index, node) != "N:M":
        return error(
            node.id,
            "relation-nary-cardinality",
            f"Relation '{node.name}' links {entity_links} entities and must be N:M",
        )
    return None


def _check_dependency_ends(node: Node, index: GraphIndex, prefix: str) -> Optional[Diagnostic]:
    if len(dependents_of(index, node)) != 1:
        return error(
            node.id,
            f"{prefix}-dependent",
            f"Dependency '{node.name}' must link exactly one dependent weak entity",
        )
    if len(owners_of(index, node)) != 1:
        return error(node.id, f"{prefix}-owner", f"Dependency '{node.name}' must have exactly one owner entity")
    return None


def validate_existence_dependency(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    neighbors = neighbors_of(index, node)
    if not neighbors:
        return error(node.id, "existence-isolated", f"Existence dependency '{node.name}' is isolated")

    for other, edge in neighbors:
        if other.kind == "keyAttribute":
            return error(node.id, "existence-key", f"Existence dependency '{node.name}' cannot have a key attribute")
        if other.family == "attribute":
            return error(node.id, "existence-attribute", f"Existence dependency '{node.name}' cannot have attributes")
        if other.family in ("relation", "specialization"):
            return error(
                node.id,
                "existence-connection",
                f"Existence dependency '{node.name}' can only be connected to entities",
            )
        if edge.kind != "weighted":
            return error(
                node.id,
                "existence-weighted-edge",
                f"Existence dependency '{node.name}' only accepts weighted edges",
            )

    return _check_dependency_ends(node, index, "existence")


def validate_identifying_dependency(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    neighbors = neighbors_of(index, node)
    if not neighbors:
        return error(node.id, "identifying-isolated", f"Identifying dependency '{node.name}' is isolated")

    keys = 0
    for other, edge in neighbors:
        if edge.kind == "optional":
            return error(
                node.id,
                "identifying-optional-edge",
                f"Identifying dependency '{node.name}' cannot use optional edges",
            )
        if other.family in ("relation", "specialization"):
            return error(
                node.id,
                "identifying-connection",
                f"Identifying dependency '{node.name}' can only be connected to entities and attributes",
            )
        if other.family == "entity" and edge.kind != "weighted":
            return error(
                node.id,
                "identifying-weighted-edge",
                f"Identifying dependency '{node.name}' is linked to '{other.name}' without a weighted edge",
            )
        if other.family == "attribute" and edge.kind != "transition":
            return error(
                node.id,
                "identifying-attribute-edge",
                f"Identifying dependency '{node.name}': attributes can only be linked with transitions",
            )
        if other.kind == "keyAttribute":
            keys += 1

    found = _check_dependency_ends(node, index, "identifying")
    if found is not None:
        return found
    if keys != 1:
        return error(
            node.id,
            "identifying-key",
            f"Identifying dependency '{node.name}' needs exactly one key attribute (found {keys})",
        )
    return None

"""Rules for entities and weak entities."""

from typing import Optional

from er2sql.ir.diagnostics import Diagnostic, error
from er2sql.ir.graph import Node
from er2sql.query.index import GraphIndex
from er2sql.query.traversal import (
    connected_attributes_of,
    dependency_relations_of,
    neighbors_of,
    owners_of,
    primary_key_of,
    specializations_of_child,
    specializations_of_parent,
)


def validate_entity(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    """Check a strong entity; returns the first error found."""
    neighbors = neighbors_of(index, node)
    if not neighbors:
        return error(node.id, "entity-isolated", f"Entity '{node.name}' is isolated: not connected to the model")

    for other, edge in neighbors:
        if other.family == "entity":
            return error(node.id, "entity-entity", f"Entity '{node.name}' is connected directly to another entity")
        if other.family == "attribute" and edge.kind not in ("transition", "optional"):
            return error(
                node.id,
                "entity-attribute-edge",
                f"Entity '{node.name}': attributes can only be linked with transitions or optional edges",
            )
        if other.family == "relation" and edge.kind != "weighted":
            return error(
                node.id,
                "entity-relation-edge",
                f"Entity '{node.name}': relation '{other.name}' must be linked with a weighted edge",
            )
        if other.family == "specialization" and edge.kind != "transition":
            return error(
                node.id,
                "entity-specialization-edge",
                f"Entity '{node.name}': specialization '{other.name}' must be linked with a transition",
            )

    as_child = specializations_of_child(index, node)
    if len(as_child) > 1:
        return error(node.id, "entity-multiple-parents", f"Entity '{node.name}' is a subclass in more than one specialization")
    if len(specializations_of_parent(index, node)) > 1:
        return error(
            node.id,
            "entity-multiple-specializations",
            f"Entity '{node.name}' is the parent of more than one specialization",
        )

    # Subclasses inherit their identity
    if not as_child and primary_key_of(index, node) is None:
        return error(node.id, "entity-missing-key", f"Entity '{node.name}' has no key attribute")
    return None


def validate_weak_entity(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    """Check a weak entity; returns the first error found."""
    neighbors = neighbors_of(index, node)
    if not neighbors:
        return error(node.id, "weakEntity-isolated", f"Weak entity '{node.name}' is isolated: not connected to the model")

    for other, edge in neighbors:
        if other.family == "entity":
            return error(node.id, "weakEntity-entity", f"Weak entity '{node.name}' is connected directly to another entity")
        if other.family == "attribute" and edge.kind != "transition":
            return error(
                node.id,
                "weakEntity-attribute-edge",
                f"Weak entity '{node.name}': attributes can only be linked with transitions",
            )
        if other.family == "relation" and edge.kind != "weighted":
            return error(
                node.id,
                "weakEntity-relation-edge",
                f"Weak entity '{node.name}': relation '{other.name}' must be linked with a weighted edge",
            )

    dependencies = dependency_relations_of(index, node)
    if not dependencies:
        return error(
            node.id,
            "weakEntity-no-dependency",
            f"Weak entity '{node.name}' is not the dependent of any existence or identifying dependency",
        )
    if not _reaches_strong_entity(index, node):
        return error(
            node.id,
            "weakEntity-no-strong-owner",
            f"Weak entity '{node.name}' does not reach a strong entity through its dependencies",
        )

    kinds = {relation.kind for relation in dependencies}
    has_key = primary_key_of(index, node) is not None
    if "existenceDependentRelation" in kinds and not has_key:
        return error(
            node.id,
            "weakEntity-existence-missing-key",
            f"Weak entity '{node.name}' depends in existence and needs a key attribute",
        )
    if "identifyingDependentRelation" in kinds:
        if has_key:
            return error(
                node.id,
                "weakEntity-identifying-has-key",
                f"Weak entity '{node.name}' depends in identification and cannot have its own key",
            )
        if not connected_attributes_of(index, node):
            return error(
                node.id,
                "weakEntity-identifying-no-attributes",
                f"Weak entity '{node.name}' depends in identification and needs at least one attribute",
            )
    return None


def _reaches_strong_entity(index: GraphIndex, weak: Node) -> bool:
    visited = {weak.id}
    pending = [weak]
    while pending:
        current = pending.pop()
        for relation in dependency_relations_of(index, current):
            for owner in owners_of(index, relation):
                if owner.kind == "entity":
                    return True
                if owner.id not in visited:
                    visited.add(owner.id)
                    pending.append(owner)
    return False

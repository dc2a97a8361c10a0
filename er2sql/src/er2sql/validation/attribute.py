"""Rules for the five attribute kinds."""

from typing import Iterable, Optional

from er2sql.ir.diagnostics import Diagnostic, error
from er2sql.ir.graph import Node
from er2sql.query.index import GraphIndex
from er2sql.query.traversal import neighbors_of
from .common import root_owners_of

KEY_OWNER_KINDS = ("entity", "weakEntity", "relation", "identifyingDependentRelation")


def _preamble(node: Node, index: GraphIndex, prefix: str, allowed_edges: Iterable[str]) -> Optional[Diagnostic]:
    """Isolation and edge-kind checks every attribute kind starts with."""
    neighbors = neighbors_of(index, node)
    if not neighbors:
        return error(node.id, f"{prefix}-isolated", f"Attribute '{node.name}' is isolated: not connected to the model")
    allowed = set(allowed_edges)
    for _, edge in neighbors:
        if edge.kind not in allowed:
            return error(
                node.id,
                f"{prefix}-edge",
                f"Attribute '{node.name}' cannot be linked with a {edge.kind} edge",
            )
    return None


def _ambiguity(node: Node, index: GraphIndex, prefix: str) -> Optional[Diagnostic]:
    if len(root_owners_of(index, node)) > 1:
        return error(
            node.id,
            f"{prefix}-ambiguous",
            f"Attribute '{node.name}' belongs to more than one entity, relation or specialization",
        )
    return None


def _owners(node: Node, index: GraphIndex):
    """Sources of incoming edges, i.e. what the attribute hangs from."""
    return [index.nodes[edge.source_id] for edge in index.incoming(node.id)]


def _children(node: Node, index: GraphIndex):
    return [index.nodes[edge.target_id] for edge in index.outgoing(node.id)]


def validate_attribute(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    found = _preamble(node, index, "attribute", ("transition", "optional"))
    if found is not None:
        return found
    for other, _ in neighbors_of(index, node):
        if other.kind == "keyAttribute":
            return error(node.id, "attribute-key-link", f"Attribute '{node.name}' cannot be linked to a key attribute")
    for child in _children(node, index):
        if child.kind == "alternativeKeyAttribute":
            return error(
                node.id,
                "attribute-alternative-key-child",
                f"Attribute '{node.name}' cannot be the parent of an alternative key",
            )
    return _ambiguity(node, index, "attribute")


def validate_key_attribute(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    neighbors = neighbors_of(index, node)
    if not neighbors:
        return error(node.id, "keyAttribute-isolated", f"Key attribute '{node.name}' is isolated: not connected to the model")
    for other, edge in neighbors:
        if edge.kind == "weighted":
            return error(node.id, "keyAttribute-edge", f"Key attribute '{node.name}' cannot use weighted edges")
        if edge.kind == "optional" and other.kind in ("entity", "weakEntity", "identifyingDependentRelation"):
            return error(node.id, "keyAttribute-optional", f"Key attribute '{node.name}' cannot be optional")
        if edge.kind != "transition":
            return error(node.id, "keyAttribute-edge", f"Key attribute '{node.name}' can only be linked with transitions")
    for owner in _owners(node, index):
        if owner.kind not in KEY_OWNER_KINDS:
            return error(
                node.id,
                "keyAttribute-owner",
                f"Key attribute '{node.name}' must belong to an entity, weak entity, relation or identifying dependency",
            )
    if index.outgoing(node.id):
        return error(node.id, "keyAttribute-children", f"Key attribute '{node.name}' cannot have children")
    return _ambiguity(node, index, "keyAttribute")


def validate_alternative_key_attribute(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    found = _preamble(node, index, "alternativeKeyAttribute", ("transition", "optional"))
    if found is not None:
        return found
    for owner in _owners(node, index):
        if owner.family == "specialization":
            return error(
                node.id,
                "alternativeKeyAttribute-owner",
                f"Alternative key '{node.name}' cannot belong to a specialization",
            )
    for child in _children(node, index):
        if child.kind != "attribute":
            return error(
                node.id,
                "alternativeKeyAttribute-children",
                f"Alternative key '{node.name}' can only be composed of plain attributes",
            )
    return _ambiguity(node, index, "alternativeKeyAttribute")


def validate_multi_valued_attribute(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    found = _preamble(node, index, "multiValuedAttribute", ("transition", "optional"))
    if found is not None:
        return found
    for owner in _owners(node, index):
        if owner.family == "specialization" or owner.kind in (
            "existenceDependentRelation",
            "identifyingDependentRelation",
        ):
            return error(
                node.id,
                "multiValuedAttribute-owner",
                f"Multi-valued attribute '{node.name}' cannot belong to a specialization or a dependency",
            )
    for child in _children(node, index):
        if child.kind != "multiValuedAttribute":
            return error(
                node.id,
                "multiValuedAttribute-children",
                f"Multi-valued attribute '{node.name}' can only be composed of multi-valued attributes",
            )
    return _ambiguity(node, index, "multiValuedAttribute")


def validate_derived_attribute(node: Node, index: GraphIndex) -> Optional[Diagnostic]:
    found = _preamble(node, index, "derivedAttribute", ("transition", "optional"))
    if found is not None:
        return found
    for owner in _owners(node, index):
        if owner.family == "specialization":
            return error(
                node.id,
                "derivedAttribute-owner",
                f"Derived attribute '{node.name}' cannot belong to a specialization",
            )
    if index.outgoing(node.id):
        return error(node.id, "derivedAttribute-children", f"Derived attribute '{node.name}' must be a leaf")
    return _ambiguity(node, index, "derivedAttribute")

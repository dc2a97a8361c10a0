"""Stateless traversal helpers over a GraphIndex."""

import re
from typing import List, Literal, Optional, Tuple

from er2sql.errors import MalformedLabelError, MissingParentError, RelationArityError
from er2sql.ir.graph import (
    ATTRIBUTE_KINDS,
    DEPENDENCY_KINDS,
    ENTITY_KINDS,
    SPECIALIZATION_CONSTRAINT_EDGE_KINDS,
    SPECIALIZATION_KINDS,
    Edge,
    Node,
    EDGE_TYPES,
)
from .index import GraphIndex

Cardinality = Literal["-", "1:1", "1:N", "N:M"]

_WEIGHT_RE = re.compile(r"^\(\s*([0-9]+)\s*\.\.\s*([0-9]+|N)\s*\)$")
_WHITESPACE_RE = re.compile(r"\s+")


def neighbors_of(index: GraphIndex, node: Node) -> List[Tuple[Node, Edge]]:
    """Every (neighbor, edge) pair touching ``node``, regardless of direction."""
    result = []
    for edge in index.edges_of(node.id):
        result.append((index.nodes[edge.other_end(node.id)], edge))
    return result


def _unique(nodes: List[Node]) -> List[Node]:
    seen = set()
    result = []
    for node in nodes:
        if node.id not in seen:
            seen.add(node.id)
            result.append(node)
    return result


def connected_attributes_of(index: GraphIndex, node: Node) -> List[Node]:
    return _unique([n for n, _ in neighbors_of(index, node) if n.kind in ATTRIBUTE_KINDS])


def connected_relations_of(index: GraphIndex, node: Node) -> List[Node]:
    """Plain relations touching ``node``, deduplicated by id."""
    return _unique([n for n, _ in neighbors_of(index, node) if n.kind == "relation"])


def connected_entities_of(index: GraphIndex, relation: Node) -> List[Tuple[Node, Edge]]:
    """Entity and weak-entity links of a relation, one entry per touching edge."""
    return [(n, e) for n, e in neighbors_of(index, relation) if n.kind in ENTITY_KINDS]


def attribute_children_of(index: GraphIndex, attribute: Node) -> List[Tuple[Node, Edge]]:
    """Composite children: attributes reached through outgoing edges."""
    result = []
    for edge in index.outgoing(attribute.id):
        child = index.nodes[edge.target_id]
        if child.kind in ATTRIBUTE_KINDS and child.id != attribute.id:
            result.append((child, edge))
    return result


def cardinality_label_of(index: GraphIndex, element) -> str:
    """
    Cardinality text of a graph element.

    Args:
        index: Graph index
        element: A node or an edge

    Returns:
        The label of a weighted edge, the derived cardinality of a relation,
        or an empty string for anything else
    """
    if isinstance(element, tuple(EDGE_TYPES.values())):
        return element.label if element.kind == "weighted" else ""
    if element.family == "relation":
        return relation_cardinality(index, element)
    return ""


def relation_cardinality(index: GraphIndex, relation: Node) -> Cardinality:
    """Classify a relation from the weighted edges touching it."""
    weighted = [e for e in index.edges_of(relation.id) if e.kind == "weighted"]
    if not weighted:
        return "-"
    many = sum(1 for e in weighted if "..N" in e.label)
    if many >= 2:
        return "N:M"
    if many == 1:
        return "1:N"
    return "1:1"


def parse_weight(label: str) -> Optional[Tuple[int, Optional[int]]]:
    """Parse ``(min..max)``; max is None for ``N``. Returns None when malformed."""
    match = _WEIGHT_RE.match(label.strip())
    if not match:
        return None
    upper = match.group(2)
    return int(match.group(1)), (None if upper == "N" else int(upper))


def is_mandatory(edge: Edge) -> bool:
    """True when the weighted edge's participation minimum is at least one."""
    if edge.kind != "weighted":
        return False
    weight = parse_weight(edge.label)
    return weight is not None and weight[0] >= 1


def is_many(edge: Edge) -> bool:
    return edge.kind == "weighted" and "..N" in edge.label


def primary_keys_of(index: GraphIndex, node: Node) -> List[Node]:
    return [a for a in connected_attributes_of(index, node) if a.kind == "keyAttribute"]


def primary_key_of(index: GraphIndex, node: Node) -> Optional[Node]:
    keys = primary_keys_of(index, node)
    return keys[0] if keys else None


def find_other_entity(index: GraphIndex, relation: Node, known: Node) -> Optional[Node]:
    """
    Find the entity on the other side of a binary relation.

    Returns:
        The linked entity that is not ``known``, or None for a reflexive relation

    Raises:
        RelationArityError: If the relation has fewer than two entity links
    """
    links = connected_entities_of(index, relation)
    if len(links) < 2:
        raise RelationArityError(
            f"Relation '{relation.name}' links {len(links)} entities, expected at least 2",
            relation.id,
        )
    for entity, _ in links:
        if entity.id != known.id:
            return entity
    return None


def dependency_relations_of(index: GraphIndex, weak: Node) -> List[Node]:
    """Dependency relations in which ``weak`` is the dependent."""
    result = []
    for other, _ in neighbors_of(index, weak):
        if other.kind in DEPENDENCY_KINDS and any(n.id == weak.id for n in dependents_of(index, other)):
            result.append(other)
    return _unique(result)


def dependents_of(index: GraphIndex, relation: Node) -> List[Node]:
    """
    Weak entities that depend through ``relation``.

    A single weak entity among the relation's ends is the dependent whatever
    the edge direction. When several weak entities are linked (a weak chain),
    the ones the relation points at are the dependents.
    """
    weak_ends = _unique([n for n, _ in connected_entities_of(index, relation) if n.kind == "weakEntity"])
    if len(weak_ends) <= 1:
        return weak_ends
    targets = {edge.target_id for edge in index.outgoing(relation.id)}
    return [n for n in weak_ends if n.id in targets]


def owners_of(index: GraphIndex, relation: Node) -> List[Node]:
    """Entities linked to a dependency relation other than its dependents."""
    dependent_ids = {n.id for n in dependents_of(index, relation)}
    return _unique(
        [n for n, _ in connected_entities_of(index, relation) if n.id not in dependent_ids]
    )


def _structural(edge: Edge) -> bool:
    return edge.kind not in SPECIALIZATION_CONSTRAINT_EDGE_KINDS


def specialization_parent(index: GraphIndex, specialization: Node) -> Optional[Node]:
    """Entity with a structural edge into the specialization."""
    for edge in index.incoming(specialization.id):
        source = index.nodes[edge.source_id]
        if _structural(edge) and source.kind in ENTITY_KINDS:
            return source
    return None


def specialization_parents(index: GraphIndex, specialization: Node) -> List[Node]:
    return _unique(
        [
            index.nodes[e.source_id]
            for e in index.incoming(specialization.id)
            if _structural(e) and index.nodes[e.source_id].kind in ENTITY_KINDS
        ]
    )


def specialization_children(index: GraphIndex, specialization: Node) -> List[Node]:
    """Entities the specialization points at, in graph order."""
    return _unique(
        [
            index.nodes[e.target_id]
            for e in index.outgoing(specialization.id)
            if _structural(e) and index.nodes[e.target_id].kind in ENTITY_KINDS
        ]
    )


def specializations_of_child(index: GraphIndex, entity: Node) -> List[Node]:
    """Specializations under which ``entity`` hangs as a child."""
    return _unique(
        [
            index.nodes[e.source_id]
            for e in index.incoming(entity.id)
            if _structural(e) and index.nodes[e.source_id].kind in SPECIALIZATION_KINDS
        ]
    )


def specializations_of_parent(index: GraphIndex, entity: Node) -> List[Node]:
    """Specializations ``entity`` is the parent of."""
    return _unique(
        [
            index.nodes[e.target_id]
            for e in index.outgoing(entity.id)
            if _structural(e) and index.nodes[e.target_id].kind in SPECIALIZATION_KINDS
        ]
    )


def specialization_parent_of(index: GraphIndex, child: Node) -> Optional[Tuple[Node, Node]]:
    """
    Resolve the parent of a specialization child.

    Returns:
        (specialization, parent entity), or None if ``child`` is not a subclass

    Raises:
        MissingParentError: If the specialization has no parent edge
    """
    specializations = specializations_of_child(index, child)
    if not specializations:
        return None
    specialization = specializations[0]
    parent = specialization_parent(index, specialization)
    if parent is None:
        raise MissingParentError(
            f"Specialization '{specialization.name}' above '{child.name}' has no parent entity",
            specialization.id,
        )
    return specialization, parent


def safe_name(node: Node) -> str:
    """Label text with all whitespace removed."""
    return _WHITESPACE_RE.sub("", node.name)


def split_label(node: Node) -> Tuple[str, str]:
    """
    Split an attribute label ``name:TYPE``.

    Returns:
        (name, TYPE) with whitespace stripped from both and the type uppercased

    Raises:
        MalformedLabelError: If there is no ':' or either side is empty
    """
    text = safe_name(node)
    if ":" not in text:
        raise MalformedLabelError(
            f"Attribute label '{node.name}' is not of the form 'name:TYPE'", node.id
        )
    name, sql_type = text.split(":", 1)
    if not name or not sql_type:
        raise MalformedLabelError(
            f"Attribute label '{node.name}' is missing a name or a type", node.id
        )
    return name, sql_type.upper()

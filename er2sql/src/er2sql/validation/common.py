"""Helpers shared by the validation rules."""

from typing import Set

from er2sql.ir.graph import Node
from er2sql.query.index import GraphIndex
from er2sql.query.traversal import neighbors_of

# Node families that can own attributes
OWNER_FAMILIES = ("entity", "relation", "specialization")


def root_owners_of(index: GraphIndex, attribute: Node) -> Set[str]:
    """
    Ids of every root element reachable from an attribute through other attributes.

    Owners (entities, relations, specializations) end the walk; attributes
    are expanded. A well-formed attribute has exactly one root owner.
    """
    owners: Set[str] = set()
    visited = {attribute.id}
    pending = [attribute]
    while pending:
        current = pending.pop()
        for other, _ in neighbors_of(index, current):
            if other.id in visited:
                continue
            if other.family in OWNER_FAMILIES:
                owners.add(other.id)
            elif other.family == "attribute":
                visited.add(other.id)
                pending.append(other)
    return owners

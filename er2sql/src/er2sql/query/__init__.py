"""Read-only queries over an ER graph."""

from .index import GraphIndex
from .identity import IdentityColumn, identity_columns_of
from .traversal import (
    cardinality_label_of,
    connected_attributes_of,
    connected_entities_of,
    connected_relations_of,
    dependency_relations_of,
    find_other_entity,
    neighbors_of,
    primary_key_of,
    primary_keys_of,
    relation_cardinality,
    safe_name,
    specialization_parent_of,
    split_label,
)

__all__ = [
    "GraphIndex",
    "IdentityColumn",
    "identity_columns_of",
    "cardinality_label_of",
    "connected_attributes_of",
    "connected_entities_of",
    "connected_relations_of",
    "dependency_relations_of",
    "find_other_entity",
    "neighbors_of",
    "primary_key_of",
    "primary_keys_of",
    "relation_cardinality",
    "safe_name",
    "specialization_parent_of",
    "split_label",
]

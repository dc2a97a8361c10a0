"""Identity (primary key) resolution for entities, weak entities and subclasses."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from er2sql.config.logging import get_logger
from er2sql.errors import IdentityCycleError, MissingPrimaryKeyError
from er2sql.ir.graph import Node
from .index import GraphIndex
from .traversal import (
    find_other_entity,
    dependency_relations_of,
    primary_key_of,
    primary_keys_of,
    relation_cardinality,
    safe_name,
    specialization_parent_of,
    split_label,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class IdentityColumn:
    """One column of an entity's identity."""

    name: str
    sql_type: str
    ref_table: Optional[str] = None  # set when the column is inherited
    ref_column: Optional[str] = None
    via: Optional[str] = None  # dependency relation or specialization it came through

    @property
    def inherited(self) -> bool:
        return self.ref_table is not None


def partial_key_of(index: GraphIndex, weak: Node, relation: Node) -> Optional[Node]:
    """Partial key contributed by a dependency: the weak entity's own key or the relation's."""
    if relation.kind == "existenceDependentRelation":
        return primary_key_of(index, weak)
    return primary_key_of(index, relation)


def identity_columns_of(
    index: GraphIndex,
    entity: Node,
    cache: Optional[Dict[str, List[IdentityColumn]]] = None,
) -> List[IdentityColumn]:
    """
    Resolve the identity columns of an entity.

    Strong entities use their own key attributes. Specialization children
    inherit the parent's identity under the same column names. Weak entities
    take each owner's identity prefixed with the owner's name, followed by the
    partial key unless the dependency is 1:1; ancestors come first.

    Args:
        index: Graph index
        entity: Entity or weak entity node
        cache: Optional request-scoped memo keyed by node id

    Returns:
        Ordered identity columns

    Raises:
        IdentityCycleError: If resolution revisits an element on its own path
        MissingPrimaryKeyError: If no identity can be found
    """
    if cache is None:
        cache = {}
    return _resolve(index, entity, cache, set())


def _resolve(
    index: GraphIndex,
    entity: Node,
    cache: Dict[str, List[IdentityColumn]],
    visiting: Set[str],
) -> List[IdentityColumn]:
    if entity.id in cache:
        return cache[entity.id]
    if entity.id in visiting:
        logger.error(f"Identity cycle detected at '{entity.name}' ({entity.id})")
        raise IdentityCycleError(
            f"Identity resolution for '{entity.name}' loops back on itself", entity.id
        )

    visiting.add(entity.id)
    try:
        if entity.kind == "weakEntity":
            columns = _weak_identity(index, entity, cache, visiting)
        else:
            columns = _strong_identity(index, entity, cache, visiting)
    finally:
        visiting.discard(entity.id)

    cache[entity.id] = columns
    return columns


def _strong_identity(index, entity, cache, visiting) -> List[IdentityColumn]:
    link = specialization_parent_of(index, entity)
    if link is not None:
        specialization, parent = link
        parent_table = safe_name(parent)
        return [
            IdentityColumn(col.name, col.sql_type, parent_table, col.name, specialization.id)
            for col in _resolve(index, parent, cache, visiting)
        ]

    keys = primary_keys_of(index, entity)
    if not keys:
        raise MissingPrimaryKeyError(f"Entity '{entity.name}' has no key attribute", entity.id)
    columns = []
    for key in keys:
        name, sql_type = split_label(key)
        columns.append(IdentityColumn(name, sql_type))
    return columns


def _weak_identity(index, weak, cache, visiting) -> List[IdentityColumn]:
    columns: List[IdentityColumn] = []
    for relation in dependency_relations_of(index, weak):
        owner = find_other_entity(index, relation, weak)
        if owner is None:
            raise IdentityCycleError(
                f"Dependency '{relation.name}' makes '{weak.name}' depend on itself", relation.id
            )
        owner_table = safe_name(owner)
        for col in _resolve(index, owner, cache, visiting):
            columns.append(
                IdentityColumn(f"{owner_table}_{col.name}", col.sql_type, owner_table, col.name, relation.id)
            )

        if relation_cardinality(index, relation) == "1:1":
            continue
        partial = partial_key_of(index, weak, relation)
        if partial is not None:
            name, sql_type = split_label(partial)
            if name not in {c.name for c in columns}:
                columns.append(IdentityColumn(name, sql_type))

    if not columns:
        raise MissingPrimaryKeyError(
            f"Weak entity '{weak.name}' has no dependency to derive its identity from", weak.id
        )
    return columns

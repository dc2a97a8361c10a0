"""Tables for entities and weak entities."""

from typing import Dict, List, Tuple

from er2sql.config.logging import get_logger
from er2sql.ir.graph import Node
from er2sql.ir.schema import ColumnSpec, ForeignKeySpec, TableSpec
from er2sql.query.identity import IdentityColumn, partial_key_of
from er2sql.query.traversal import (
    dependency_relations_of,
    primary_keys_of,
    relation_cardinality,
    safe_name,
    specialization_parent_of,
    split_label,
)
from .attributes import add_alternate_keys, add_column, add_plain_columns
from .context import SynthesisContext

logger = get_logger(__name__)


def _add_identity(table: TableSpec, identity: List[IdentityColumn]) -> None:
    """Identity columns are NOT NULL; one column is an inline PRIMARY KEY, more a table-level one."""
    for col in identity:
        table.columns.append(
            ColumnSpec(name=col.name, sql_type=col.sql_type, primary_key=len(identity) == 1)
        )
    if len(identity) > 1:
        table.primary_key = [col.name for col in identity]


def build_entity_table(ctx: SynthesisContext, entity: Node) -> TableSpec:
    """
    Build the table of a strong entity or a specialization child.

    Relation foreign keys and specialization discriminators are appended later
    by their own passes.
    """
    table = TableSpec(name=safe_name(entity), origin="entity", element_id=entity.id)
    _add_identity(table, ctx.identity(entity))

    # A subclass identifies through its parent; any key it declares is only unique
    if specialization_parent_of(ctx.index, entity) is not None:
        for key in primary_keys_of(ctx.index, entity):
            name, sql_type = split_label(key)
            add_column(table, ColumnSpec(name=name, sql_type=sql_type, unique=True))

    add_alternate_keys(ctx, table, entity)
    add_plain_columns(ctx, table, entity)
    ctx.tables[entity.id] = table
    logger.debug(f"Built table {table.name} with {len(table.columns)} columns")
    return table


def _group_inherited(identity: List[IdentityColumn]) -> List[ForeignKeySpec]:
    groups: Dict[Tuple[str, str], ForeignKeySpec] = {}
    for col in identity:
        if not col.inherited:
            continue
        key = (col.via, col.ref_table)
        if key not in groups:
            groups[key] = ForeignKeySpec(columns=[], ref_table=col.ref_table, ref_columns=[], on_delete="CASCADE")
        groups[key].columns.append(col.name)
        groups[key].ref_columns.append(col.ref_column)
    return list(groups.values())


def build_weak_entity_table(ctx: SynthesisContext, weak: Node) -> TableSpec:
    """
    Build the table of a weak entity.

    The full identity is always a table-level PRIMARY KEY; inherited columns
    reference their owner with ON DELETE CASCADE. In a 1:1 dependency the
    partial key is not part of the identity and becomes NOT NULL UNIQUE.
    """
    table = TableSpec(name=safe_name(weak), origin="weakEntity", element_id=weak.id)
    identity = ctx.identity(weak)
    for col in identity:
        table.columns.append(ColumnSpec(name=col.name, sql_type=col.sql_type))
    table.primary_key = [col.name for col in identity]
    table.foreign_keys.extend(_group_inherited(identity))

    dependencies = dependency_relations_of(ctx.index, weak)
    for relation in dependencies:
        if relation_cardinality(ctx.index, relation) != "1:1":
            continue
        partial = partial_key_of(ctx.index, weak, relation)
        if partial is None:
            continue
        name, sql_type = split_label(partial)
        if not table.has_column(name):
            table.columns.append(ColumnSpec(name=name, sql_type=sql_type, unique=True))

    add_alternate_keys(ctx, table, weak)
    add_plain_columns(ctx, table, weak)
    for relation in dependencies:
        add_plain_columns(ctx, table, relation, prefix=safe_name(relation))

    ctx.tables[weak.id] = table
    logger.debug(f"Built weak entity table {table.name} keyed by {table.primary_key}")
    return table

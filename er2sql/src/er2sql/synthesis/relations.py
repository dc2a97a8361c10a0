"""Foreign keys and junction tables for plain relations."""

from collections import Counter
from typing import List, Optional, Tuple

from er2sql.config.logging import get_logger
from er2sql.errors import RelationArityError
from er2sql.ir.graph import Edge, Node
from er2sql.ir.schema import ColumnSpec, ForeignKeySpec, TableSpec
from er2sql.query.traversal import (
    connected_entities_of,
    is_mandatory,
    is_many,
    primary_keys_of,
    relation_cardinality,
    safe_name,
    split_label,
)
from .attributes import add_alternate_keys, add_column, add_plain_columns
from .context import SynthesisContext

logger = get_logger(__name__)

Link = Tuple[Node, Edge]


def apply_relation(ctx: SynthesisContext, relation: Node) -> Tuple[TableSpec, Optional[TableSpec]]:
    """
    Materialize one plain relation.

    Returns:
        (holding table, junction table or None). The holding table is the
        one that carries the relation's foreign key and owns its
        multi-valued attributes.

    Raises:
        RelationArityError: If the relation links fewer than two entities
    """
    links = connected_entities_of(ctx.index, relation)
    if len(links) < 2:
        raise RelationArityError(
            f"Relation '{relation.name}' links {len(links)} entities, expected at least 2", relation.id
        )

    cardinality = relation_cardinality(ctx.index, relation)
    if cardinality == "N:M" or len(links) > 2:
        junction = build_junction_table(ctx, relation, links)
        return junction, junction

    first, second = links
    if first[0].id == second[0].id:
        return _reflexive(ctx, relation, first[0], cardinality), None
    if cardinality == "1:N":
        return _one_to_many(ctx, relation, first, second), None
    return _one_to_one(ctx, relation, first, second), None


def _fk_columns(ctx: SynthesisContext, target: Node, prefix: str, nullable: bool, unique: bool):
    identity = ctx.identity(target)
    columns = [
        ColumnSpec(name=f"{prefix}_{col.name}", sql_type=col.sql_type, nullable=nullable)
        for col in identity
    ]
    if unique and len(columns) == 1:
        columns[0] = columns[0].model_copy(update={"unique": True})
    return columns, [col.name for col in identity]


def _attach_foreign_key(
    table: TableSpec,
    columns: List[ColumnSpec],
    ref_table: str,
    ref_columns: List[str],
    unique: bool,
    prefix: Optional[str] = None,
) -> None:
    columns = [add_column(table, column, prefix) for column in columns]
    if unique and len(columns) > 1:
        table.unique.append([c.name for c in columns])
    nullable = any(c.nullable for c in columns)
    table.foreign_keys.append(
        ForeignKeySpec(
            columns=[c.name for c in columns],
            ref_table=ref_table,
            ref_columns=ref_columns,
            on_delete="SET NULL" if nullable else None,
        )
    )


def _one_to_many(ctx: SynthesisContext, relation: Node, first: Link, second: Link) -> TableSpec:
    """The ``..N`` side holds the foreign key; the relation's attributes fold into it."""
    holder, other = (first, second) if is_many(first[1]) else (second, first)
    holder_node, holder_edge = holder
    other_node = other[0]

    table = ctx.table_for(holder_node)
    other_table = safe_name(other_node)
    columns, ref_columns = _fk_columns(ctx, other_node, other_table, not is_mandatory(holder_edge), False)
    _attach_foreign_key(table, columns, other_table, ref_columns, unique=False, prefix=safe_name(relation))
    add_plain_columns(ctx, table, relation, include_keys=True, prefix=safe_name(relation))
    logger.debug(f"1:N relation {relation.name}: foreign key on {table.name}")
    return table


def _one_to_one(ctx: SynthesisContext, relation: Node, first: Link, second: Link) -> TableSpec:
    """
    A mandatory side facing an optional side holds a NOT NULL UNIQUE foreign key.
    Otherwise the side with the smaller node id holds it.
    """
    first_mandatory = is_mandatory(first[1])
    second_mandatory = is_mandatory(second[1])
    if first_mandatory != second_mandatory:
        holder, other = (first, second) if first_mandatory else (second, first)
    else:
        holder, other = (first, second) if first[0].id < second[0].id else (second, first)
    holder_node, holder_edge = holder
    other_node = other[0]

    table = ctx.table_for(holder_node)
    other_table = safe_name(other_node)
    columns, ref_columns = _fk_columns(ctx, other_node, other_table, not is_mandatory(holder_edge), True)
    _attach_foreign_key(table, columns, other_table, ref_columns, unique=True, prefix=safe_name(relation))
    add_plain_columns(ctx, table, relation, include_keys=True, prefix=safe_name(relation))
    logger.debug(f"1:1 relation {relation.name}: foreign key on {table.name}")
    return table


def _reflexive(ctx: SynthesisContext, relation: Node, entity: Node, cardinality: str) -> TableSpec:
    """Nullable self reference named after the relation."""
    table = ctx.table_for(entity)
    unique = cardinality == "1:1"
    columns, ref_columns = _fk_columns(ctx, entity, safe_name(relation), True, unique)
    _attach_foreign_key(table, columns, table.name, ref_columns, unique=unique)
    add_plain_columns(ctx, table, relation, include_keys=True, prefix=safe_name(relation))
    return table


def build_junction_table(ctx: SynthesisContext, relation: Node, links: List[Link]) -> TableSpec:
    """
    Junction table for an N:M (or n-ary) relation.

    One NOT NULL foreign-key group per entity link, ON DELETE CASCADE.
    Entities linked more than once get ``_1``, ``_2`` suffixes. The key is
    the relation's own key attributes when declared, else every foreign-key
    column.
    """
    table = TableSpec(name=safe_name(relation), origin="junction", element_id=relation.id)

    own_keys = primary_keys_of(ctx.index, relation)
    for key in own_keys:
        name, sql_type = split_label(key)
        table.columns.append(ColumnSpec(name=name, sql_type=sql_type, primary_key=len(own_keys) == 1))
    if len(own_keys) > 1:
        table.primary_key = [c.name for c in table.columns]

    totals = Counter(entity.id for entity, _ in links)
    seen: Counter = Counter()
    fk_names: List[str] = []
    for entity, _ in links:
        seen[entity.id] += 1
        entity_table = safe_name(entity)
        suffix = f"_{seen[entity.id]}" if totals[entity.id] > 1 else ""
        identity = ctx.identity(entity)
        names = [f"{entity_table}_{col.name}{suffix}" for col in identity]
        for name, col in zip(names, identity):
            table.columns.append(ColumnSpec(name=name, sql_type=col.sql_type))
        table.foreign_keys.append(
            ForeignKeySpec(
                columns=names,
                ref_table=entity_table,
                ref_columns=[col.name for col in identity],
                on_delete="CASCADE",
            )
        )
        fk_names.extend(names)

    if not own_keys:
        table.primary_key = fk_names

    add_alternate_keys(ctx, table, relation)
    add_plain_columns(ctx, table, relation)
    ctx.tables[relation.id] = table
    logger.debug(f"Junction table {table.name} for {len(links)} entity links")
    return table

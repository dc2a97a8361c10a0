"""Attribute-to-column transformation."""

from typing import List, Optional, Tuple

from er2sql.ir.graph import Edge, Node
from er2sql.ir.schema import ColumnSpec, TableSpec
from er2sql.query.traversal import (
    attribute_children_of,
    neighbors_of,
    safe_name,
    split_label,
)
from .context import SynthesisContext


def owned_attributes(ctx: SynthesisContext, owner: Node) -> List[Tuple[Node, Edge]]:
    """Attributes linked directly to ``owner`` with the edge that links them."""
    seen = set()
    result = []
    for other, edge in neighbors_of(ctx.index, owner):
        if other.family == "attribute" and other.id not in seen:
            seen.add(other.id)
            result.append((other, edge))
    return result


def leaf_columns(ctx: SynthesisContext, attribute: Node, nullable: bool) -> List[ColumnSpec]:
    """
    Flatten an attribute into columns.

    A composite attribute contributes its children (recursively); a child
    hanging off an optional edge is nullable, and so is everything below an
    optional parent.
    """
    children = attribute_children_of(ctx.index, attribute)
    if not children:
        name, sql_type = split_label(attribute)
        return [ColumnSpec(name=name, sql_type=sql_type, nullable=nullable)]

    columns = []
    for child, edge in children:
        columns.extend(leaf_columns(ctx, child, nullable or edge.kind == "optional"))
    return columns


def attribute_base_name(attribute: Node) -> str:
    """Name part of a label; composite parents may carry no type."""
    text = safe_name(attribute)
    return text.split(":", 1)[0] if ":" in text else text


def add_column(table: TableSpec, column: ColumnSpec, prefix: Optional[str] = None) -> ColumnSpec:
    """Append a column, renaming it ``<prefix>_<name>`` if the name is taken."""
    if prefix and table.has_column(column.name):
        column = column.model_copy(update={"name": f"{prefix}_{column.name}"})
    table.columns.append(column)
    return column


def add_alternate_keys(ctx: SynthesisContext, table: TableSpec, owner: Node) -> None:
    """Single alternate keys become inline UNIQUE columns, composite ones a UNIQUE (...) constraint."""
    for attribute, edge in owned_attributes(ctx, owner):
        if attribute.kind != "alternativeKeyAttribute":
            continue
        columns = leaf_columns(ctx, attribute, edge.kind == "optional")
        if len(columns) == 1:
            add_column(table, columns[0].model_copy(update={"unique": True}))
        else:
            for column in columns:
                add_column(table, column)
            table.unique.append([c.name for c in columns])


def add_plain_columns(
    ctx: SynthesisContext,
    table: TableSpec,
    owner: Node,
    include_keys: bool = False,
    prefix: Optional[str] = None,
) -> None:
    """
    Append simple, derived and optional columns of ``owner`` in that order.

    Args:
        ctx: Synthesis context
        table: Table receiving the columns
        owner: Entity or relation whose attributes are added
        include_keys: Fold key attributes in as plain NOT NULL columns
        prefix: Rename colliding columns to ``<prefix>_<name>``
    """
    links = owned_attributes(ctx, owner)
    simple_kinds = ("attribute", "keyAttribute") if include_keys else ("attribute",)

    for attribute, edge in links:
        if attribute.kind in simple_kinds and edge.kind != "optional":
            for column in leaf_columns(ctx, attribute, False):
                add_column(table, column, prefix)

    for attribute, edge in links:
        if attribute.kind == "derivedAttribute":
            name, sql_type = split_label(attribute)
            if attribute.equation:
                column = ColumnSpec(name=name, sql_type=sql_type, generated=attribute.equation.strip())
            else:
                column = ColumnSpec(name=name, sql_type=sql_type, nullable=True)
            add_column(table, column, prefix)

    for attribute, edge in links:
        if attribute.kind in simple_kinds and edge.kind == "optional":
            for column in leaf_columns(ctx, attribute, True):
                add_column(table, column, prefix)

"""Auxiliary tables for multi-valued attributes."""

from typing import List

from er2sql.ir.graph import Node
from er2sql.ir.schema import ColumnSpec, ForeignKeySpec, TableSpec
from .attributes import attribute_base_name, leaf_columns, owned_attributes
from .context import SynthesisContext


def build_multivalued_tables(ctx: SynthesisContext, holder: TableSpec, owner: Node) -> List[TableSpec]:
    """
    One ``<Holder>_<attr>`` table per multi-valued attribute of ``owner``.

    The table repeats the holding table's key columns, adds the value
    columns, keys on all of them and cascades deletes from the holder.
    """
    key_names = holder.key_columns()
    key_columns = [
        ColumnSpec(name=name, sql_type=holder.column(name).sql_type) for name in key_names
    ]

    tables = []
    for attribute, _ in owned_attributes(ctx, owner):
        if attribute.kind != "multiValuedAttribute":
            continue
        values = [c.model_copy(update={"nullable": False}) for c in leaf_columns(ctx, attribute, False)]
        table = TableSpec(
            name=f"{holder.name}_{attribute_base_name(attribute)}",
            origin="multiValued",
            element_id=attribute.id,
            columns=[c.model_copy() for c in key_columns] + values,
            primary_key=key_names + [c.name for c in values],
            foreign_keys=[
                ForeignKeySpec(
                    columns=list(key_names),
                    ref_table=holder.name,
                    ref_columns=list(key_names),
                    on_delete="CASCADE",
                )
            ],
        )
        tables.append(table)
    return tables

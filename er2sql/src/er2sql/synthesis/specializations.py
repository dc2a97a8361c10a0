"""Discriminator columns linking specialization parents and children."""

from er2sql.config.logging import get_logger
from er2sql.errors import MissingParentError
from er2sql.ir.graph import Node
from er2sql.ir.schema import ColumnSpec, ForeignKeySpec
from er2sql.query.traversal import safe_name, specialization_children, specialization_parent
from .context import SynthesisContext

logger = get_logger(__name__)


def apply_specialization(ctx: SynthesisContext, specialization: Node) -> None:
    """
    Add discriminators to the parent and child tables of one specialization.

    Exclusive specializations use a single ``<Parent>_type`` column, one
    value per child; overlapped ones use one ``is_<Child>`` flag per child.
    Each child references the parent on (identity, discriminator).

    Raises:
        MissingParentError: If the specialization has no parent entity
    """
    parent = specialization_parent(ctx.index, specialization)
    if parent is None:
        raise MissingParentError(
            f"Specialization '{specialization.name}' has no parent entity", specialization.id
        )
    parent_table = ctx.table_for(parent)
    identity = [col.name for col in ctx.identity(parent)]
    children = specialization_children(ctx.index, specialization)

    if specialization.exclusive:
        _exclusive(ctx, specialization, parent_table, identity, children)
    else:
        _overlapped(ctx, specialization, parent_table, identity, children)
    logger.debug(
        f"Specialization {specialization.name}: {parent_table.name} -> "
        f"{', '.join(safe_name(c) for c in children)}"
    )


def _exclusive(ctx, specialization, parent_table, identity, children) -> None:
    discriminator = f"{parent_table.name}_type"
    sql_type = f"VARCHAR({ctx.settings.discriminator_length})"
    names = [safe_name(child) for child in children]

    parent_table.columns.append(
        ColumnSpec(name=discriminator, sql_type=sql_type, nullable=not specialization.total)
    )
    values = ", ".join(f"'{name}'" for name in names)
    parent_table.checks.append(f"{discriminator} IN ({values})")
    parent_table.unique.append(identity + [discriminator])

    for child, name in zip(children, names):
        child_table = ctx.table_for(child)
        child_table.columns.append(ColumnSpec(name=discriminator, sql_type=sql_type, default=f"'{name}'"))
        child_table.checks.append(f"{discriminator} = '{name}'")
        child_table.foreign_keys.append(
            ForeignKeySpec(
                columns=identity + [discriminator],
                ref_table=parent_table.name,
                ref_columns=identity + [discriminator],
                on_delete="CASCADE",
            )
        )


def _overlapped(ctx, specialization, parent_table, identity, children) -> None:
    flags = [f"is_{safe_name(child)}" for child in children]

    for flag in flags:
        parent_table.columns.append(ColumnSpec(name=flag, sql_type="BOOLEAN", default="FALSE"))
        parent_table.unique.append(identity + [flag])
    if specialization.total and flags:
        parent_table.checks.append(" OR ".join(f"{flag} = TRUE" for flag in flags))

    for child, flag in zip(children, flags):
        child_table = ctx.table_for(child)
        child_table.columns.append(ColumnSpec(name=flag, sql_type="BOOLEAN", default="TRUE"))
        child_table.checks.append(f"{flag} = TRUE")
        child_table.foreign_keys.append(
            ForeignKeySpec(
                columns=identity + [flag],
                ref_table=parent_table.name,
                ref_columns=identity + [flag],
                on_delete="CASCADE",
            )
        )

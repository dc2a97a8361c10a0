"""SQL DDL rendering of a relational schema."""

from typing import List, Optional

from er2sql.ir.schema import ColumnSpec, ForeignKeySpec, RelationalSchema, TableSpec

INDENT = "    "


def render_column(column: ColumnSpec) -> str:
    """NAME TYPE [GENERATED ALWAYS AS (..) STORED] [DEFAULT v] [NOT NULL|NULL] [PRIMARY KEY|UNIQUE]"""
    parts = [column.name, column.sql_type]
    if column.generated:
        parts.append(f"GENERATED ALWAYS AS ({column.generated}) STORED")
    if column.default is not None:
        parts.append(f"DEFAULT {column.default}")
    if not column.generated:
        parts.append("NULL" if column.nullable else "NOT NULL")
    if column.primary_key:
        parts.append("PRIMARY KEY")
    elif column.unique:
        parts.append("UNIQUE")
    return " ".join(parts)


def render_foreign_key(fk: ForeignKeySpec) -> str:
    text = (
        f"FOREIGN KEY ({', '.join(fk.columns)}) "
        f"REFERENCES {fk.ref_table}({', '.join(fk.ref_columns)})"
    )
    if fk.on_delete:
        text += f" ON DELETE {fk.on_delete}"
    return text


def render_table(table: TableSpec) -> str:
    """One CREATE TABLE statement; constraints follow columns as PK, UNIQUE, CHECK, FK."""
    lines: List[str] = [render_column(c) for c in table.columns]
    if table.primary_key:
        lines.append(f"PRIMARY KEY ({', '.join(table.primary_key)})")
    for group in table.unique:
        lines.append(f"UNIQUE ({', '.join(group)})")
    for check in table.checks:
        lines.append(f"CHECK ({check})")
    for fk in table.foreign_keys:
        lines.append(render_foreign_key(fk))

    body = ",\n".join(INDENT + line for line in lines)
    return f"CREATE TABLE {table.name} (\n{body}\n);"


def render_schema(schema: RelationalSchema, header: Optional[str] = None) -> str:
    """
    Render the whole document.

    Args:
        schema: Tables in emission order
        header: Comment text for the first line

    Returns:
        SQL text; statements are separated by blank lines
    """
    blocks = []
    if header:
        blocks.append("\n".join(f"-- {line}" for line in header.splitlines()))
    blocks.extend(render_table(table) for table in schema.tables)
    return "\n\n".join(blocks) + "\n"

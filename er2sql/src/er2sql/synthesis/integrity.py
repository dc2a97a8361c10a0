"""Consistency checks over a synthesized relational schema."""

from typing import List

from er2sql.config.logging import get_logger
from er2sql.ir.schema import RelationalSchema

logger = get_logger(__name__)


def check_schema(schema: RelationalSchema) -> List[str]:
    """
    Check primary key and foreign key constraints.

    Args:
        schema: Synthesized schema

    Returns:
        List of issue messages (empty if all checks pass)
    """
    issues = []
    tables = {}
    for table in schema.tables:
        if table.name in tables:
            issues.append(f"{table.name}: duplicate table name")
        tables[table.name] = table

    for table in schema.tables:
        column_names = [c.name for c in table.columns]
        duplicates = sorted({name for name in column_names if column_names.count(name) > 1})
        for name in duplicates:
            issues.append(f"{table.name}: duplicate column '{name}'")

        # Check primary key exists
        key = table.key_columns()
        if not key:
            issues.append(f"{table.name}: missing primary key")
        for pk_col in key:
            if pk_col not in column_names:
                issues.append(f"{table.name}: primary key column '{pk_col}' does not exist")

        for group in table.unique:
            for col in group:
                if col not in column_names:
                    issues.append(f"{table.name}: unique column '{col}' does not exist")

        for fk in table.foreign_keys:
            missing = [c for c in fk.columns if c not in column_names]
            if missing:
                issues.append(f"{table.name}: foreign key column(s) {missing} do not exist")
                continue
            if len(fk.columns) != len(fk.ref_columns):
                issues.append(
                    f"{table.name}: foreign key {fk.columns} has {len(fk.ref_columns)} referenced columns"
                )
                continue
            # Check referenced table exists
            if fk.ref_table not in tables:
                issues.append(f"{table.name}: foreign key {fk.columns} references missing table '{fk.ref_table}'")
                continue
            ref_column_names = {c.name for c in tables[fk.ref_table].columns}
            for ref_col in fk.ref_columns:
                if ref_col not in ref_column_names:
                    issues.append(
                        f"{table.name}: foreign key {fk.columns} references "
                        f"'{fk.ref_table}.{ref_col}' which does not exist"
                    )

    if issues:
        logger.warning(f"Schema integrity check found {len(issues)} issues")
    else:
        logger.debug("Schema integrity check passed")
    return issues

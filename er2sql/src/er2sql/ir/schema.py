"""Relational schema IR produced by the synthesizer and rendered by the emitter."""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

TableOrigin = Literal["entity", "weakEntity", "junction", "multiValued"]
OnDelete = Literal["CASCADE", "SET NULL"]


class ColumnSpec(BaseModel):
    """Specification for a table column."""

    name: str
    sql_type: str  # uppercased label type, e.g. "VARCHAR(50)"
    nullable: bool = False
    unique: bool = False  # inline UNIQUE
    primary_key: bool = False  # inline PRIMARY KEY
    default: Optional[str] = None  # rendered verbatim
    generated: Optional[str] = None  # GENERATED ALWAYS AS (<expr>) STORED


class ForeignKeySpec(BaseModel):
    """Specification for a (possibly composite) foreign key constraint."""

    columns: List[str]
    ref_table: str
    ref_columns: List[str]
    on_delete: Optional[OnDelete] = None


class TableSpec(BaseModel):
    """Specification for one CREATE TABLE statement."""

    name: str
    origin: TableOrigin = "entity"
    element_id: Optional[str] = None  # graph node the table was built from
    columns: List[ColumnSpec] = Field(default_factory=list)
    primary_key: List[str] = Field(default_factory=list)  # table-level PRIMARY KEY (...)
    unique: List[List[str]] = Field(default_factory=list)  # table-level UNIQUE (...)
    checks: List[str] = Field(default_factory=list)
    foreign_keys: List[ForeignKeySpec] = Field(default_factory=list)

    def column(self, name: str) -> Optional[ColumnSpec]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def has_column(self, name: str) -> bool:
        return self.column(name) is not None

    def key_columns(self) -> List[str]:
        """Primary key columns, inline or table-level."""
        if self.primary_key:
            return list(self.primary_key)
        return [c.name for c in self.columns if c.primary_key]


class RelationalSchema(BaseModel):
    """Ordered collection of tables for one compiled diagram."""

    tables: List[TableSpec] = Field(default_factory=list)

    def table(self, name: str) -> Optional[TableSpec]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

"""Tests for SQL rendering."""

from er2sql.emit.sql import render_column, render_schema, render_table
from er2sql.ir.graph import DerivedAttribute, Entity, TotalExclusiveSpecialization
from er2sql.ir.schema import ColumnSpec, ForeignKeySpec, RelationalSchema, TableSpec
from er2sql.query.index import GraphIndex
from er2sql.synthesis import synthesize


def test_render_column_variants():
    assert render_column(ColumnSpec(name="id", sql_type="INTEGER", primary_key=True)) == (
        "id INTEGER NOT NULL PRIMARY KEY"
    )
    assert render_column(ColumnSpec(name="nick", sql_type="TEXT", nullable=True)) == "nick TEXT NULL"
    assert render_column(ColumnSpec(name="mail", sql_type="TEXT", unique=True)) == "mail TEXT NOT NULL UNIQUE"
    assert render_column(ColumnSpec(name="is_A", sql_type="BOOLEAN", default="FALSE")) == (
        "is_A BOOLEAN DEFAULT FALSE NOT NULL"
    )


def test_generated_column_has_no_null_clause():
    column = ColumnSpec(name="age", sql_type="INTEGER", generated="2024 - birth_year")
    assert render_column(column) == "age INTEGER GENERATED ALWAYS AS (2024 - birth_year) STORED"


def test_constraint_order():
    table = TableSpec(
        name="T",
        columns=[
            ColumnSpec(name="a", sql_type="INTEGER"),
            ColumnSpec(name="b", sql_type="INTEGER"),
        ],
        primary_key=["a", "b"],
        unique=[["b"]],
        checks=["a > 0"],
        foreign_keys=[ForeignKeySpec(columns=["b"], ref_table="U", ref_columns=["id"], on_delete="SET NULL")],
    )
    assert render_table(table) == (
        "CREATE TABLE T (\n"
        "    a INTEGER NOT NULL,\n"
        "    b INTEGER NOT NULL,\n"
        "    PRIMARY KEY (a, b),\n"
        "    UNIQUE (b),\n"
        "    CHECK (a > 0),\n"
        "    FOREIGN KEY (b) REFERENCES U(id) ON DELETE SET NULL\n"
        ");"
    )


def test_render_schema_header_and_spacing():
    schema = RelationalSchema(
        tables=[
            TableSpec(name="A", columns=[ColumnSpec(name="id", sql_type="INTEGER", primary_key=True)]),
            TableSpec(name="B", columns=[ColumnSpec(name="id", sql_type="INTEGER", primary_key=True)]),
        ]
    )
    sql = render_schema(schema, "Generated by er2sql\nsecond line")
    assert sql == (
        "-- Generated by er2sql\n"
        "-- second line\n"
        "\n"
        "CREATE TABLE A (\n    id INTEGER NOT NULL PRIMARY KEY\n);\n"
        "\n"
        "CREATE TABLE B (\n    id INTEGER NOT NULL PRIMARY KEY\n);\n"
    )
    assert render_schema(schema).startswith("CREATE TABLE A")


def test_specialization_child_rendering(builder, settings):
    builder.entity("p", "Person")
    builder.node(TotalExclusiveSpecialization, "s", "Kind")
    builder.node(Entity, "st", "Student")
    builder.attribute("st", "school", "school: varchar(20)")
    builder.node(Entity, "t", "Teacher")
    builder.link("p", "s")
    builder.link("s", "st")
    builder.link("s", "t")
    schema = synthesize(GraphIndex(builder.build()), settings)

    assert render_table(schema.table("Student")) == (
        "CREATE TABLE Student (\n"
        "    id INTEGER NOT NULL PRIMARY KEY,\n"
        "    school VARCHAR(20) NOT NULL,\n"
        "    Person_type VARCHAR(100) DEFAULT 'Student' NOT NULL,\n"
        "    CHECK (Person_type = 'Student'),\n"
        "    FOREIGN KEY (id, Person_type) REFERENCES Person(id, Person_type) ON DELETE CASCADE\n"
        ");"
    )
    assert render_table(schema.table("Person")) == (
        "CREATE TABLE Person (\n"
        "    id INTEGER NOT NULL PRIMARY KEY,\n"
        "    Person_type VARCHAR(100) NOT NULL,\n"
        "    UNIQUE (id, Person_type),\n"
        "    CHECK (Person_type IN ('Student', 'Teacher'))\n"
        ");"
    )


def test_derived_column_rendering(builder, settings):
    builder.entity("p", "Person")
    builder.attribute("p", "born", "birth_year: INTEGER")
    builder.attribute("p", "age", "age: INTEGER", cls=DerivedAttribute, equation=" 2024 - birth_year ")
    schema = synthesize(GraphIndex(builder.build()), settings)

    assert "    age INTEGER GENERATED ALWAYS AS (2024 - birth_year) STORED\n" in render_table(
        schema.table("Person")
    )

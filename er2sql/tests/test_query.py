"""Tests for the graph query layer."""

import pytest
from er2sql.errors import DanglingReferenceError, IdentityCycleError, MalformedLabelError, RelationArityError
from er2sql.ir.graph import (
    Attribute,
    Entity,
    ExistenceDependentRelation,
    Graph,
    KeyAttribute,
    PartialExclusiveSpecialization,
    Relation,
    Transition,
    WeakEntity,
)
from er2sql.query import (
    GraphIndex,
    cardinality_label_of,
    connected_attributes_of,
    connected_entities_of,
    connected_relations_of,
    find_other_entity,
    identity_columns_of,
    neighbors_of,
    primary_key_of,
    relation_cardinality,
    safe_name,
    specialization_parent_of,
    split_label,
)


def _two_entities(builder, label_a, label_b):
    builder.entity("a", "A")
    builder.entity("b", "B")
    builder.relation("r", "R", ("a", label_a), ("b", label_b))
    index = GraphIndex(builder.build())
    return index, index.nodes["r"]


def test_cardinality_without_weighted_edges(builder):
    builder.node(Relation, "r", "R")
    index = GraphIndex(builder.build())
    assert relation_cardinality(index, index.nodes["r"]) == "-"


def test_cardinality_one_to_many(builder):
    index, relation = _two_entities(builder, "(0..N)", "(1..1)")
    assert relation_cardinality(index, relation) == "1:N"


def test_cardinality_many_to_many(builder):
    index, relation = _two_entities(builder, "(1..N)", "(1..N)")
    assert relation_cardinality(index, relation) == "N:M"


def test_cardinality_one_to_one(builder):
    index, relation = _two_entities(builder, "(1..1)", "(0..1)")
    assert relation_cardinality(index, relation) == "1:1"


def test_cardinality_label_of(builder):
    index, relation = _two_entities(builder, "(0..N)", "(1..1)")
    weighted = [e for e in index.graph.edges if e.kind == "weighted"][0]
    assert cardinality_label_of(index, weighted) == "(0..N)"
    assert cardinality_label_of(index, relation) == "1:N"
    assert cardinality_label_of(index, index.nodes["a"]) == ""


def test_neighbors_are_direction_agnostic(builder):
    index, relation = _two_entities(builder, "(0..N)", "(1..1)")
    assert {n.id for n, _ in neighbors_of(index, relation)} == {"a", "b"}
    assert [n.id for n in connected_relations_of(index, index.nodes["a"])] == ["r"]
    assert [n.id for n in connected_attributes_of(index, index.nodes["a"])] == ["a_key"]


def test_connected_entities_one_entry_per_edge(builder):
    builder.entity("p", "Person")
    builder.relation("f", "Follows", ("p", "(0..N)"), ("p", "(0..N)"))
    index = GraphIndex(builder.build())
    links = connected_entities_of(index, index.nodes["f"])
    assert [n.id for n, _ in links] == ["p", "p"]
    # Reflexive: there is no other entity
    assert find_other_entity(index, index.nodes["f"], index.nodes["p"]) is None


def test_find_other_entity(builder):
    index, relation = _two_entities(builder, "(0..N)", "(1..1)")
    assert find_other_entity(index, relation, index.nodes["a"]).id == "b"


def test_find_other_entity_needs_two_links(builder):
    builder.entity("a", "A")
    builder.relation("r", "R", ("a", "(0..N)"))
    index = GraphIndex(builder.build())
    with pytest.raises(RelationArityError) as exc:
        find_other_entity(index, index.nodes["r"], index.nodes["a"])
    assert exc.value.element_id == "r"


def test_primary_key_of(builder):
    builder.entity("a", "A")
    builder.entity("b", "B", key=None)
    index = GraphIndex(builder.build())
    assert primary_key_of(index, index.nodes["a"]).id == "a_key"
    assert primary_key_of(index, index.nodes["b"]) is None


def test_split_label():
    assert split_label(Attribute(id="x", name=" price : decimal(10, 2) ")) == ("price", "DECIMAL(10,2)")
    with pytest.raises(MalformedLabelError):
        split_label(Attribute(id="x", name="price"))
    with pytest.raises(MalformedLabelError):
        split_label(Attribute(id="x", name=": INTEGER"))


def test_safe_name_strips_whitespace():
    assert safe_name(Entity(id="x", name=" Order Line ")) == "OrderLine"


def test_two_level_weak_chain_identity(builder):
    """Test that weak-entity identity lists ancestors first."""
    builder.entity("bld", "Building", key="code: CHAR(4)")
    builder.node(WeakEntity, "room", "Room")
    builder.attribute("room", "room_no", "number: INTEGER", cls=KeyAttribute)
    builder.node(ExistenceDependentRelation, "has_room", "HasRoom")
    builder.weighted("bld", "has_room", "(1..1)")
    builder.weighted("has_room", "room", "(1..N)")

    builder.node(WeakEntity, "seat", "Seat")
    builder.attribute("seat", "seat_no", "seat: INTEGER", cls=KeyAttribute)
    builder.node(ExistenceDependentRelation, "has_seat", "HasSeat")
    builder.weighted("room", "has_seat", "(1..1)")
    builder.weighted("has_seat", "seat", "(0..N)")

    index = GraphIndex(builder.build())
    seat = identity_columns_of(index, index.nodes["seat"])

    assert [c.name for c in seat] == ["Room_Building_code", "Room_number", "seat"]
    assert [c.ref_table for c in seat] == ["Room", "Room", None]
    assert [c.ref_column for c in seat[:2]] == ["Building_code", "number"]
    assert seat[0].sql_type == "CHAR(4)"


def test_one_to_one_dependency_leaves_out_partial_key(builder):
    builder.entity("u", "User")
    builder.node(WeakEntity, "prof", "Profile")
    builder.attribute("prof", "prof_key", "handle: VARCHAR(30)", cls=KeyAttribute)
    builder.node(ExistenceDependentRelation, "d", "HasProfile")
    builder.weighted("u", "d", "(1..1)")
    builder.weighted("d", "prof", "(0..1)")
    index = GraphIndex(builder.build())

    assert [c.name for c in identity_columns_of(index, index.nodes["prof"])] == ["User_id"]


def test_dependency_cycle_raises(builder):
    for weak, key in (("w1", "k1: INTEGER"), ("w2", "k2: INTEGER")):
        builder.node(WeakEntity, weak, weak.upper())
        builder.attribute(weak, f"{weak}_key", key, cls=KeyAttribute)
    builder.node(ExistenceDependentRelation, "d1", "D1")
    builder.weighted("w2", "d1", "(1..1)")
    builder.weighted("d1", "w1", "(0..N)")
    builder.node(ExistenceDependentRelation, "d2", "D2")
    builder.weighted("w1", "d2", "(1..1)")
    builder.weighted("d2", "w2", "(0..N)")
    index = GraphIndex(builder.build())

    with pytest.raises(IdentityCycleError):
        identity_columns_of(index, index.nodes["w1"])


def test_specialization_child_inherits_identity(builder):
    builder.entity("p", "Person")
    builder.node(PartialExclusiveSpecialization, "s", "Kind")
    builder.node(Entity, "st", "Student")
    builder.link("p", "s")
    builder.link("s", "st")
    index = GraphIndex(builder.build())

    specialization, parent = specialization_parent_of(index, index.nodes["st"])
    assert (specialization.id, parent.id) == ("s", "p")
    identity = identity_columns_of(index, index.nodes["st"])
    assert [(c.name, c.ref_table, c.via) for c in identity] == [("id", "Person", "s")]
    assert specialization_parent_of(index, index.nodes["p"]) is None


def test_dangling_edges_kept_aside():
    graph = Graph(
        nodes=[Entity(id="a", name="A")],
        edges=[Transition(id="e", source_id="a", target_id="ghost")],
    )
    index = GraphIndex(graph)
    assert index.edges_of("a") == []
    assert [e.id for e in index.dangling] == ["e"]
    with pytest.raises(DanglingReferenceError) as exc:
        index.check_references()
    assert exc.value.element_id == "e"

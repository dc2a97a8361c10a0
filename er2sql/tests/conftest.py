"""Shared fixtures: a small builder for ER graphs."""

import pytest
from er2sql.config.settings import Settings
from er2sql.ir.graph import (
    Attribute,
    Entity,
    Graph,
    KeyAttribute,
    OptionalEdge,
    Relation,
    Transition,
    WeightedEdge,
)


class GraphBuilder:
    """Accumulates nodes and edges; edge ids are generated in insertion order."""

    def __init__(self):
        self.nodes = []
        self.edges = []

    def node(self, cls, node_id, name, **fields):
        self.nodes.append(cls(id=node_id, name=name, **fields))
        return node_id

    def edge(self, cls, source, target, **fields):
        edge_id = f"e{len(self.edges) + 1}"
        self.edges.append(cls(id=edge_id, source_id=source, target_id=target, **fields))
        return edge_id

    def link(self, source, target):
        return self.edge(Transition, source, target)

    def weighted(self, source, target, label):
        return self.edge(WeightedEdge, source, target, label=label)

    def entity(self, node_id, name, key="id: INTEGER"):
        """Entity with a key attribute ``<node_id>_key`` (no key when ``key`` is None)."""
        self.node(Entity, node_id, name)
        if key is not None:
            self.attribute(node_id, f"{node_id}_key", key, cls=KeyAttribute)
        return node_id

    def attribute(self, owner, node_id, label, cls=Attribute, optional=False, **fields):
        self.node(cls, node_id, label, **fields)
        self.edge(OptionalEdge if optional else Transition, owner, node_id)
        return node_id

    def relation(self, node_id, name, *ends, cls=Relation):
        """Relation linked to each (entity_id, weight label) pair."""
        self.node(cls, node_id, name)
        for entity_id, label in ends:
            self.weighted(entity_id, node_id, label)
        return node_id

    def build(self, graph_id="test"):
        return Graph(id=graph_id, nodes=self.nodes, edges=self.edges)


@pytest.fixture
def builder():
    return GraphBuilder()


@pytest.fixture
def settings():
    """Settings with defaults, independent of the environment."""
    return Settings(sql_header="Generated by er2sql", discriminator_length=100)

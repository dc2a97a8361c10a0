"""Graph, diagnostic and relational schema models."""

from .graph import (
    Graph,
    Node,
    Edge,
    NodeKind,
    EdgeKind,
    Entity,
    WeakEntity,
    Relation,
    ExistenceDependentRelation,
    IdentifyingDependentRelation,
    PartialExclusiveSpecialization,
    TotalExclusiveSpecialization,
    PartialOverlappedSpecialization,
    TotalOverlappedSpecialization,
    Attribute,
    KeyAttribute,
    AlternativeKeyAttribute,
    MultiValuedAttribute,
    DerivedAttribute,
    Transition,
    WeightedEdge,
    OptionalEdge,
    ExclusionEdge,
    InclusionEdge,
    DisjointnessEdge,
    OverlapEdge,
)
from .diagnostics import Diagnostic
from .schema import ColumnSpec, ForeignKeySpec, TableSpec, RelationalSchema

__all__ = [
    "Graph",
    "Node",
    "Edge",
    "NodeKind",
    "EdgeKind",
    "Entity",
    "WeakEntity",
    "Relation",
    "ExistenceDependentRelation",
    "IdentifyingDependentRelation",
    "PartialExclusiveSpecialization",
    "TotalExclusiveSpecialization",
    "PartialOverlappedSpecialization",
    "TotalOverlappedSpecialization",
    "Attribute",
    "KeyAttribute",
    "AlternativeKeyAttribute",
    "MultiValuedAttribute",
    "DerivedAttribute",
    "Transition",
    "WeightedEdge",
    "OptionalEdge",
    "ExclusionEdge",
    "InclusionEdge",
    "DisjointnessEdge",
    "OverlapEdge",
    "Diagnostic",
    "ColumnSpec",
    "ForeignKeySpec",
    "TableSpec",
    "RelationalSchema",
]

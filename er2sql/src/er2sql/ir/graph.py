"""Graph model for ER diagrams.

Nodes and edges are closed discriminated unions keyed on ``kind``. The graph
owns every element; everything else refers to elements by id.
"""

from typing import Annotated, ClassVar, Dict, FrozenSet, List, Literal, Optional, Union, get_args
from pydantic import BaseModel, ConfigDict, Discriminator, Field, model_validator

NodeKind = Literal[
    "entity",
    "weakEntity",
    "relation",
    "existenceDependentRelation",
    "identifyingDependentRelation",
    "partialExclusiveSpecialization",
    "totalExclusiveSpecialization",
    "partialOverlappedSpecialization",
    "totalOverlappedSpecialization",
    "attribute",
    "keyAttribute",
    "alternativeKeyAttribute",
    "multiValuedAttribute",
    "derivedAttribute",
]

EdgeKind = Literal[
    "transition",
    "weighted",
    "optional",
    "exclusion",
    "inclusion",
    "disjointness",
    "overlap",
]

NodeFamily = Literal["entity", "relation", "specialization", "attribute"]


class _NodeBase(BaseModel):
    """Fields shared by every node variant."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""  # label text

    family: ClassVar[NodeFamily]


class Entity(_NodeBase):
    """A strong entity."""

    kind: Literal["entity"] = "entity"
    family: ClassVar[NodeFamily] = "entity"


class WeakEntity(_NodeBase):
    """An entity whose identity depends on an owner through a dependency relation."""

    kind: Literal["weakEntity"] = "weakEntity"
    family: ClassVar[NodeFamily] = "entity"


class Relation(_NodeBase):
    """A plain relationship between entities."""

    kind: Literal["relation"] = "relation"
    family: ClassVar[NodeFamily] = "relation"


class ExistenceDependentRelation(_NodeBase):
    """Dependency relation: the weak entity keeps its own partial key."""

    kind: Literal["existenceDependentRelation"] = "existenceDependentRelation"
    family: ClassVar[NodeFamily] = "relation"


class IdentifyingDependentRelation(_NodeBase):
    """Dependency relation: the weak entity's key comes from the relation's key attribute."""

    kind: Literal["identifyingDependentRelation"] = "identifyingDependentRelation"
    family: ClassVar[NodeFamily] = "relation"


class _SpecializationBase(_NodeBase):
    family: ClassVar[NodeFamily] = "specialization"
    exclusive: ClassVar[bool]
    total: ClassVar[bool]


class PartialExclusiveSpecialization(_SpecializationBase):
    kind: Literal["partialExclusiveSpecialization"] = "partialExclusiveSpecialization"
    exclusive: ClassVar[bool] = True
    total: ClassVar[bool] = False


class TotalExclusiveSpecialization(_SpecializationBase):
    kind: Literal["totalExclusiveSpecialization"] = "totalExclusiveSpecialization"
    exclusive: ClassVar[bool] = True
    total: ClassVar[bool] = True


class PartialOverlappedSpecialization(_SpecializationBase):
    kind: Literal["partialOverlappedSpecialization"] = "partialOverlappedSpecialization"
    exclusive: ClassVar[bool] = False
    total: ClassVar[bool] = False


class TotalOverlappedSpecialization(_SpecializationBase):
    kind: Literal["totalOverlappedSpecialization"] = "totalOverlappedSpecialization"
    exclusive: ClassVar[bool] = False
    total: ClassVar[bool] = True


class Attribute(_NodeBase):
    """A simple (or composite, when it has children) attribute."""

    kind: Literal["attribute"] = "attribute"
    family: ClassVar[NodeFamily] = "attribute"


class KeyAttribute(_NodeBase):
    kind: Literal["keyAttribute"] = "keyAttribute"
    family: ClassVar[NodeFamily] = "attribute"


class AlternativeKeyAttribute(_NodeBase):
    kind: Literal["alternativeKeyAttribute"] = "alternativeKeyAttribute"
    family: ClassVar[NodeFamily] = "attribute"


class MultiValuedAttribute(_NodeBase):
    kind: Literal["multiValuedAttribute"] = "multiValuedAttribute"
    family: ClassVar[NodeFamily] = "attribute"


class DerivedAttribute(_NodeBase):
    """An attribute computed from an equation over other columns."""

    kind: Literal["derivedAttribute"] = "derivedAttribute"
    family: ClassVar[NodeFamily] = "attribute"
    equation: Optional[str] = None


Specialization = Union[
    PartialExclusiveSpecialization,
    TotalExclusiveSpecialization,
    PartialOverlappedSpecialization,
    TotalOverlappedSpecialization,
]

Node = Annotated[
    Union[
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
    ],
    Discriminator("kind"),
]


class _EdgeBase(BaseModel):
    """Fields shared by every edge variant."""

    model_config = ConfigDict(frozen=True)

    id: str
    source_id: str
    target_id: str

    def other_end(self, node_id: str) -> str:
        """Return the endpoint opposite to ``node_id``."""
        return self.target_id if self.source_id == node_id else self.source_id


class Transition(_EdgeBase):
    """Default, untyped structural link."""

    kind: Literal["transition"] = "transition"


class WeightedEdge(_EdgeBase):
    """Entity-to-relation link carrying a cardinality description such as ``(0..N)``."""

    kind: Literal["weighted"] = "weighted"
    label: str = ""


class OptionalEdge(_EdgeBase):
    """Owner-to-attribute link marking the attribute nullable."""

    kind: Literal["optional"] = "optional"


class ExclusionEdge(_EdgeBase):
    kind: Literal["exclusion"] = "exclusion"


class InclusionEdge(_EdgeBase):
    kind: Literal["inclusion"] = "inclusion"


class DisjointnessEdge(_EdgeBase):
    kind: Literal["disjointness"] = "disjointness"


class OverlapEdge(_EdgeBase):
    kind: Literal["overlap"] = "overlap"


Edge = Annotated[
    Union[
        Transition,
        WeightedEdge,
        OptionalEdge,
        ExclusionEdge,
        InclusionEdge,
        DisjointnessEdge,
        OverlapEdge,
    ],
    Discriminator("kind"),
]

NODE_KINDS: FrozenSet[str] = frozenset(get_args(NodeKind))
EDGE_KINDS: FrozenSet[str] = frozenset(get_args(EdgeKind))

# kind tag -> variant class
NODE_TYPES: Dict[str, type] = {
    cls.model_fields["kind"].default: cls for cls in get_args(get_args(Node)[0])
}
EDGE_TYPES: Dict[str, type] = {
    cls.model_fields["kind"].default: cls for cls in get_args(get_args(Edge)[0])
}

ENTITY_KINDS: FrozenSet[str] = frozenset(k for k, c in NODE_TYPES.items() if c.family == "entity")
RELATION_KINDS: FrozenSet[str] = frozenset(k for k, c in NODE_TYPES.items() if c.family == "relation")
DEPENDENCY_KINDS: FrozenSet[str] = frozenset({"existenceDependentRelation", "identifyingDependentRelation"})
SPECIALIZATION_KINDS: FrozenSet[str] = frozenset(
    k for k, c in NODE_TYPES.items() if c.family == "specialization"
)
ATTRIBUTE_KINDS: FrozenSet[str] = frozenset(k for k, c in NODE_TYPES.items() if c.family == "attribute")

# Edges that only annotate a specialization; the synthesizer never reads them
SPECIALIZATION_CONSTRAINT_EDGE_KINDS: FrozenSet[str] = frozenset(
    {"exclusion", "inclusion", "disjointness", "overlap"}
)

if set(NODE_TYPES) != NODE_KINDS or set(EDGE_TYPES) != EDGE_KINDS:
    raise RuntimeError("Node/edge variant classes do not cover the declared kind tags")


class Graph(BaseModel):
    """All nodes and edges of one diagram."""

    id: str = "diagram"
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "Graph":
        """Node ids and edge ids must each be unique."""
        for label, elements in (("node", self.nodes), ("edge", self.edges)):
            seen = set()
            for element in elements:
                if element.id in seen:
                    raise ValueError(f"duplicate {label} id '{element.id}'")
                seen.add(element.id)
        return self

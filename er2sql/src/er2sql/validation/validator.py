"""Batch validation: one rule per node kind over the whole graph."""

from typing import Callable, Dict, List, Optional, Union

from er2sql.config.logging import get_logger
from er2sql.ir.diagnostics import Diagnostic
from er2sql.ir.graph import NODE_KINDS, Graph, Node
from er2sql.query.index import GraphIndex
from .attribute import (
    validate_alternative_key_attribute,
    validate_attribute,
    validate_derived_attribute,
    validate_key_attribute,
    validate_multi_valued_attribute,
)
from .entity import validate_entity, validate_weak_entity
from .labels import label_diagnostics
from .relation import validate_existence_dependency, validate_identifying_dependency, validate_relation
from .specialization import validate_specialization

logger = get_logger(__name__)

Rule = Callable[[Node, GraphIndex], Optional[Diagnostic]]

RULES: Dict[str, Rule] = {
    "entity": validate_entity,
    "weakEntity": validate_weak_entity,
    "relation": validate_relation,
    "existenceDependentRelation": validate_existence_dependency,
    "identifyingDependentRelation": validate_identifying_dependency,
    "partialExclusiveSpecialization": validate_specialization,
    "totalExclusiveSpecialization": validate_specialization,
    "partialOverlappedSpecialization": validate_specialization,
    "totalOverlappedSpecialization": validate_specialization,
    "attribute": validate_attribute,
    "keyAttribute": validate_key_attribute,
    "alternativeKeyAttribute": validate_alternative_key_attribute,
    "multiValuedAttribute": validate_multi_valued_attribute,
    "derivedAttribute": validate_derived_attribute,
}

if set(RULES) != NODE_KINDS:
    raise RuntimeError(
        f"Validation rules do not cover every node kind: missing {sorted(NODE_KINDS - set(RULES))}"
    )


def validate_graph(graph: Union[Graph, GraphIndex]) -> List[Diagnostic]:
    """
    Run every rule over every node, then the label checks.

    Args:
        graph: Graph (or an index already built over it)

    Returns:
        All diagnostics; structural errors first in node order, then label warnings
    """
    index = graph if isinstance(graph, GraphIndex) else GraphIndex(graph)
    if index.dangling:
        logger.warning(f"Ignoring {len(index.dangling)} edge(s) with unresolved endpoints")

    diagnostics: List[Diagnostic] = []
    for node in index.graph.nodes:
        found = RULES[node.kind](node, index)
        if found is not None:
            diagnostics.append(found)
    diagnostics.extend(label_diagnostics(index))

    errors = sum(1 for d in diagnostics if d.is_error)
    if errors:
        logger.info(f"Validation found {errors} error(s) and {len(diagnostics) - errors} other diagnostic(s)")
    else:
        logger.debug(f"Validation passed with {len(diagnostics)} diagnostic(s)")
    return diagnostics

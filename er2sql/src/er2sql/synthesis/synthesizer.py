"""Graph-to-relational-schema synthesis."""

from typing import List, Optional, Set, Tuple

from er2sql.config.logging import get_logger
from er2sql.config.settings import Settings, get_settings
from er2sql.errors import SchemaIntegrityError
from er2sql.ir.graph import SPECIALIZATION_KINDS, Node
from er2sql.ir.schema import RelationalSchema, TableSpec
from er2sql.query.index import GraphIndex
from .context import SynthesisContext
from .entities import build_entity_table, build_weak_entity_table
from .integrity import check_schema
from .multivalued import build_multivalued_tables
from .relations import apply_relation
from .specializations import apply_specialization

logger = get_logger(__name__)


def parents_first(tables: List[TableSpec]) -> List[TableSpec]:
    """
    Order a group of tables so that referenced tables come before the tables
    holding foreign keys to them.

    Only references inside the group are considered; ties keep graph order.
    Tables on a reference cycle are emitted in graph order.
    """
    names = {table.name for table in tables}
    pending = list(tables)
    emitted: Set[str] = set()
    ordered = []
    while pending:
        ready = next(
            (
                table
                for table in pending
                if all(
                    fk.ref_table in emitted or fk.ref_table == table.name or fk.ref_table not in names
                    for fk in table.foreign_keys
                )
            ),
            pending[0],
        )
        pending = [table for table in pending if table is not ready]
        emitted.add(ready.name)
        ordered.append(ready)
    return ordered


def synthesize(index: GraphIndex, settings: Optional[Settings] = None) -> RelationalSchema:
    """
    Build the relational schema for a validated graph.

    Passes run in a fixed order so every table's columns come out as:
    identity, alternate keys, simple/derived/optional attributes, relation
    foreign keys, then specialization discriminators. Multi-valued
    attributes get their own tables.

    Args:
        index: Index over the graph to compile
        settings: Optional settings override

    Returns:
        Tables ordered entities, weak entities, junctions, auxiliary tables;
        within each group referenced tables come first

    Raises:
        SynthesisError: Any subclass, if the graph cannot be compiled
    """
    index.check_references()
    ctx = SynthesisContext(index=index, settings=settings or get_settings())

    entities = [build_entity_table(ctx, n) for n in index.nodes_of_kind(["entity"])]
    weak_entities = [build_weak_entity_table(ctx, n) for n in index.nodes_of_kind(["weakEntity"])]

    # Holding table of every attribute owner, for multi-valued attributes
    holders: List[Tuple[TableSpec, Node]] = [(ctx.table_for(n), n) for n in index.nodes_of_kind(["entity"])]
    holders += [(ctx.table_for(n), n) for n in index.nodes_of_kind(["weakEntity"])]

    junctions = []
    for relation in index.nodes_of_kind(["relation"]):
        holder, junction = apply_relation(ctx, relation)
        holders.append((holder, relation))
        if junction is not None:
            junctions.append(junction)

    auxiliary = []
    for holder, owner in holders:
        auxiliary.extend(build_multivalued_tables(ctx, holder, owner))

    for specialization in index.nodes_of_kind(SPECIALIZATION_KINDS):
        apply_specialization(ctx, specialization)

    tables = []
    for group in (entities, weak_entities, junctions, auxiliary):
        tables.extend(parents_first(group))
    schema = RelationalSchema(tables=tables)
    issues = check_schema(schema)
    if issues:
        raise SchemaIntegrityError(issues)

    logger.info(
        f"Synthesized {len(schema.tables)} tables "
        f"({len(entities)} entities, {len(weak_entities)} weak, "
        f"{len(junctions)} junction, {len(auxiliary)} auxiliary)"
    )
    return schema

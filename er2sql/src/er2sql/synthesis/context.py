"""Request-scoped state for one synthesis run."""

from dataclasses import dataclass, field
from typing import Dict, List

from er2sql.config.settings import Settings
from er2sql.ir.graph import Node
from er2sql.ir.schema import TableSpec
from er2sql.query.identity import IdentityColumn, identity_columns_of
from er2sql.query.index import GraphIndex


@dataclass
class SynthesisContext:
    """Lookup tables shared by the transformers of a single compile call."""

    index: GraphIndex
    settings: Settings
    identity_cache: Dict[str, List[IdentityColumn]] = field(default_factory=dict)
    tables: Dict[str, TableSpec] = field(default_factory=dict)  # node id -> table built for it

    def identity(self, entity: Node) -> List[IdentityColumn]:
        return identity_columns_of(self.index, entity, self.identity_cache)

    def table_for(self, node: Node) -> TableSpec:
        return self.tables[node.id]

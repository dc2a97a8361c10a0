"""Entry points: validate a graph, compile it to SQL."""

from dataclasses import dataclass, field
from typing import List, Optional

from er2sql.config.logging import get_logger
from er2sql.config.settings import Settings, get_settings
from er2sql.emit.sql import render_schema
from er2sql.errors import SynthesisError
from er2sql.ir.diagnostics import Diagnostic, has_errors
from er2sql.ir.graph import Graph
from er2sql.ir.schema import RelationalSchema
from er2sql.query.index import GraphIndex
from er2sql.synthesis.synthesizer import synthesize
from er2sql.validation.validator import validate_graph

logger = get_logger(__name__)


@dataclass
class CompileResult:
    """Either SQL text or the diagnostics that blocked compilation."""

    sql: Optional[str] = None
    schema: Optional[RelationalSchema] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.sql is not None


def validate(graph: Graph) -> List[Diagnostic]:
    """Return every diagnostic for the graph."""
    return validate_graph(GraphIndex(graph))


def compile(graph: Graph, settings: Optional[Settings] = None) -> CompileResult:
    """
    Validate the graph and, if it has no errors, synthesize and render SQL.

    Args:
        graph: Graph snapshot; must not change during the call
        settings: Optional settings override

    Returns:
        CompileResult carrying the SQL (and any non-blocking diagnostics), or
        only the diagnostics when at least one error was found

    Raises:
        SynthesisError: If synthesis hits an inconsistency validation did not catch
    """
    settings = settings or get_settings()
    index = GraphIndex(graph)

    diagnostics = validate_graph(index)
    if has_errors(diagnostics):
        logger.info(f"Compilation of '{graph.id}' blocked by validation errors")
        return CompileResult(diagnostics=diagnostics)

    try:
        schema = synthesize(index, settings)
    except SynthesisError as e:
        logger.error(f"Synthesis of '{graph.id}' failed at element {e.element_id}: {e}")
        raise

    sql = render_schema(schema, settings.sql_header)
    return CompileResult(sql=sql, schema=schema, diagnostics=diagnostics)

"""SQL emission."""

from .sql import render_schema, render_table

__all__ = ["render_schema", "render_table"]

"""Relational schema synthesis from validated ER graphs."""

from .integrity import check_schema
from .synthesizer import synthesize

__all__ = ["check_schema", "synthesize"]

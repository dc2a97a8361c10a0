"""Faults raised while synthesizing a relational schema.

Unlike validation diagnostics these are not recoverable: the whole compile
fails and no partial SQL document is produced.
"""

from typing import List, Optional


class SynthesisError(Exception):
    """Base class for synthesis faults; carries the offending element id."""

    def __init__(self, message: str, element_id: Optional[str] = None):
        super().__init__(message)
        self.element_id = element_id


class DanglingReferenceError(SynthesisError):
    """An edge endpoint does not resolve to a node."""


class MissingPrimaryKeyError(SynthesisError):
    """An entity that needs an identity has no key attribute."""


class MalformedLabelError(SynthesisError):
    """An attribute label does not split into ``name:TYPE``."""


class MissingParentError(SynthesisError):
    """A specialization child cannot reach its parent entity."""


class RelationArityError(SynthesisError):
    """A relation has fewer than two entity links."""


class IdentityCycleError(SynthesisError):
    """Identity resolution revisited an element (dependency or specialization cycle)."""


class SchemaIntegrityError(SynthesisError):
    """The synthesized relational schema is internally inconsistent."""

    def __init__(self, issues: List[str]):
        super().__init__(
            f"Synthesized schema failed integrity check: {'; '.join(issues)}"
        )
        self.issues = issues

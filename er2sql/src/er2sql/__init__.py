"""er2sql: ER diagram validation and relational schema compilation."""

__version__ = "0.1.0"

from .compiler import CompileResult, compile, validate
from .validation.labels import check_label

__all__ = ["CompileResult", "compile", "validate", "check_label", "__version__"]

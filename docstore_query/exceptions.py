"""
Exception classes for docstore-query.
"""

from typing import Optional


class DocstoreQueryError(Exception):
    """Base exception for all docstore-query errors."""
    pass


class ValidationError(DocstoreQueryError):
    """Raised when a filter value or pagination parameter is rejected."""
    pass


class FieldNameError(ValidationError):
    """Raised when a field name could smuggle in a raw backend operator."""
    pass


class UnsupportedOperatorError(DocstoreQueryError):
    """Raised when an operator literal is outside the operator table."""
    def __init__(self, operator: str, backend: Optional[str] = None):
        message = f"Unsupported operator: {operator}"
        if backend:
            message = f"{message} (backend: {backend})"
        super().__init__(message)
        self.operator = operator
        self.backend = backend


class BackendError(DocstoreQueryError):
    """
    Raised when a count or fetch round-trip fails.

    Carries the original driver message verbatim; the driver exception is
    chained as ``__cause__``.
    """
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

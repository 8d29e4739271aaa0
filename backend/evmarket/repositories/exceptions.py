"""
Repository Exceptions

Persistence-layer failures, kept distinct from not-found results
(which repositories report as ``None`` or ``False``).
"""

from typing import Any, Dict, Optional


class RepositoryException(Exception):
    """Raised when the database rejects or fails an operation."""

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.details: Dict[str, Any] = {}
        if model:
            self.details["model"] = model
        if operation:
            self.details["operation"] = operation
        if original_error:
            self.details["original_error"] = str(original_error)
            self.details["original_error_type"] = type(original_error).__name__
        super().__init__(self.message)
        if original_error:
            self.__cause__ = original_error

"""Structured success/failure results returned by the service layer."""

from dataclasses import dataclass, field
from typing import Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Services never raise for business or persistence failures; they return
    ``ServiceResult.fail(...)`` with a human-readable reason instead.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    errors: List[Dict[str, str]] = field(default_factory=list)

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls, error: str, errors: Optional[List[Dict[str, str]]] = None
    ) -> "ServiceResult[T]":
        return cls(success=False, error=error, errors=errors or [])


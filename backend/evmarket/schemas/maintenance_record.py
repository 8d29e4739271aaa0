"""
Maintenance Record Schemas

Pydantic models for maintenance record payloads and the explicit
validation functions called before the service is invoked.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, List, Mapping, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

T = TypeVar("T")


class MaintenanceRecordCreate(BaseModel):
    """Payload for creating a maintenance record."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    seller_id: UUID
    service_type: str = Field(..., min_length=1, max_length=255)
    service_date: datetime
    description: Optional[str] = None
    parts_replaced: List[str] = Field(default_factory=list)
    location: Optional[str] = Field(default=None, max_length=255)


class MaintenanceRecordUpdate(BaseModel):
    """Partial update payload. Every field is optional; at least one is required."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    service_type: Optional[str] = Field(default=None, min_length=1, max_length=255)
    service_date: Optional[datetime] = None
    description: Optional[str] = None
    parts_replaced: Optional[List[str]] = None
    location: Optional[str] = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def require_at_least_one_field(self) -> "MaintenanceRecordUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        for name in ("service_type", "service_date", "parts_replaced"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Field values explicitly provided by the caller."""
        return self.model_dump(exclude_unset=True)


class MaintenanceRecordRead(BaseModel):
    """Serialized maintenance record, as returned and cached."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    seller_id: UUID
    service_type: str
    service_date: datetime
    description: Optional[str] = None
    parts_replaced: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class FieldError:
    """Validation failure for one payload field."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Either a validated value or the list of field errors."""

    value: Optional[T] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _field_errors(exc: ValidationError) -> List[FieldError]:
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "__root__"
        errors.append(FieldError(field=location, message=error["msg"]))
    return errors


def validate_create_payload(
    payload: Mapping[str, Any],
) -> ValidationResult[MaintenanceRecordCreate]:
    """Validate a create payload."""
    if isinstance(payload, MaintenanceRecordCreate):
        return ValidationResult(value=payload)
    try:
        return ValidationResult(value=MaintenanceRecordCreate.model_validate(payload))
    except ValidationError as e:
        return ValidationResult(errors=_field_errors(e))


def validate_update_payload(
    payload: Mapping[str, Any],
) -> ValidationResult[MaintenanceRecordUpdate]:
    """Validate a partial update payload."""
    if isinstance(payload, MaintenanceRecordUpdate):
        return ValidationResult(value=payload)
    try:
        return ValidationResult(value=MaintenanceRecordUpdate.model_validate(payload))
    except ValidationError as e:
        return ValidationResult(errors=_field_errors(e))

from .maintenance_record import (
    FieldError,
    MaintenanceRecordCreate,
    MaintenanceRecordRead,
    MaintenanceRecordUpdate,
    ValidationResult,
    validate_create_payload,
    validate_update_payload,
)

__all__ = [
    "FieldError",
    "MaintenanceRecordCreate",
    "MaintenanceRecordRead",
    "MaintenanceRecordUpdate",
    "ValidationResult",
    "validate_create_payload",
    "validate_update_payload",
]

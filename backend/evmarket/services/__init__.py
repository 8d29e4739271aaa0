"""
Service Layer

Business operations returning ServiceResult values.
"""

from .cache import CacheService
from .maintenance_record import MaintenanceRecordService
from .results import ServiceResult

__all__ = ["CacheService", "MaintenanceRecordService", "ServiceResult"]

"""
Repository Pattern Implementation

All data access goes through repositories. Not-found is a return value;
database failures are raised as RepositoryException.
"""

from .base import BaseRepository
from .exceptions import RepositoryException
from .maintenance_record import MaintenanceRecordRepository
from .seller import SellerRepository

__all__ = [
    "BaseRepository",
    "RepositoryException",
    "MaintenanceRecordRepository",
    "SellerRepository",
]

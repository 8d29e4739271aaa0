"""
Maintenance Record Repository

Data access for maintenance records. Collections are returned newest
service date first.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from evmarket.models import MaintenanceRecord
from .base import BaseRepository, IdLike, parse_id


class MaintenanceRecordRepository(BaseRepository):
    """Repository for ``MaintenanceRecord`` rows."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, MaintenanceRecord)

    async def create(self, data: Dict[str, Any]) -> MaintenanceRecord:
        """Persist a new record from validated field values."""
        return await super().create(MaintenanceRecord(**data))

    async def find_by_id(self, record_id: IdLike) -> Optional[MaintenanceRecord]:
        return await self.get(record_id)

    async def find_by_seller_id(self, seller_id: IdLike) -> List[MaintenanceRecord]:
        """All records of one seller, newest service date first."""
        owner_id = parse_id(seller_id)
        if owner_id is None:
            return []

        return await self.list(
            MaintenanceRecord.seller_id == owner_id,
            order_by=MaintenanceRecord.service_date.desc(),
        )

    async def find_all(self) -> List[MaintenanceRecord]:
        return await self.list(order_by=MaintenanceRecord.service_date.desc())

"""
Maintenance Record Service

Business rules and cache-aware orchestration for maintenance records.

Reads go through the cache-aside accessor with a one hour TTL. Writes
invalidate every cache key that can hold the affected record:

- ``record_<id>``              the record itself
- ``records_seller_<sellerId>`` its seller's collection
- ``records``                  the global collection

The write is committed before its keys are invalidated, and invalidation
is awaited before the write reports success. A read that misses after
invalidation therefore loads the committed row, never the pre-write one.
"""

from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

import structlog
from opentelemetry import trace

from ..constants import RECORD_CACHE_TTL_SECONDS
from ..domain.cache.value_objects import CacheKey
from ..models import MaintenanceRecord
from ..repositories.base import IdLike, parse_id
from ..repositories.maintenance_record import MaintenanceRecordRepository
from ..repositories.seller import SellerRepository
from ..schemas.maintenance_record import (
    MaintenanceRecordRead,
    validate_create_payload,
    validate_update_payload,
)
from .cache.cache_service import CacheService
from .results import ServiceResult

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)

RecordData = Dict[str, Any]


def serialize_record(record: MaintenanceRecord) -> RecordData:
    """JSON-safe representation used for both responses and cache entries."""
    return MaintenanceRecordRead.model_validate(record).model_dump(mode="json")


class MaintenanceRecordService:
    """
    Maintenance record operations.

    All collaborators are passed in by the caller; nothing is looked up
    from global state.
    """

    def __init__(
        self,
        repository: MaintenanceRecordRepository,
        seller_repository: SellerRepository,
        cache: CacheService,
        ttl: int = RECORD_CACHE_TTL_SECONDS,
    ):
        self.repository = repository
        self.seller_repository = seller_repository
        self.cache = cache
        self.ttl = ttl

    async def _invalidate(self, seller_id: UUID, record_id: Optional[UUID] = None) -> None:
        keys = [CacheKey.all_records(), CacheKey.records_by_seller(seller_id)]
        if record_id is not None:
            keys.insert(0, CacheKey.record(record_id))
        await self.cache.invalidate(*keys)

    async def create_record(self, data: Mapping[str, Any]) -> ServiceResult[RecordData]:
        """
        Create a record for an existing seller.

        Collection caches are invalidated; there is no per-record entry yet.
        """
        validation = validate_create_payload(data)
        if not validation.is_valid:
            return ServiceResult.fail(
                "Validation failed", [e.to_dict() for e in validation.errors]
            )
        payload = validation.value

        with tracer.start_as_current_span("maintenance_record.create"):
            try:
                seller = await self.seller_repository.find_by_id(payload.seller_id)
                if not seller:
                    return ServiceResult.fail("Seller not found")

                record = await self.repository.create(payload.model_dump())
                result = serialize_record(record)

                await self.repository.commit()
                await self._invalidate(payload.seller_id)

                logger.info(
                    "Maintenance record created",
                    record_id=result["id"],
                    seller_id=str(payload.seller_id),
                )
                return ServiceResult.ok(result)

            except Exception as e:
                logger.error(
                    "Failed to create maintenance record",
                    seller_id=str(payload.seller_id),
                    error=str(e),
                )
                return ServiceResult.fail("Failed to create maintenance record")

    async def get_record_by_id(self, record_id: IdLike) -> ServiceResult[RecordData]:
        """Fetch one record, served from cache when possible."""
        parsed_id = parse_id(record_id)
        if parsed_id is None:
            return ServiceResult.fail("Record not found")

        async def load() -> Optional[RecordData]:
            record = await self.repository.find_by_id(parsed_id)
            return serialize_record(record) if record else None

        try:
            record = await self.cache.get_or_set(CacheKey.record(parsed_id), load, self.ttl)
        except Exception as e:
            logger.error("Failed to fetch record", record_id=str(parsed_id), error=str(e))
            return ServiceResult.fail("Failed to fetch record")

        if not record:
            return ServiceResult.fail("Record not found")
        return ServiceResult.ok(record)

    async def get_records_by_seller_id(
        self, seller_id: IdLike
    ) -> ServiceResult[List[RecordData]]:
        """Fetch a seller's records, newest service date first."""
        parsed_id = parse_id(seller_id)
        if parsed_id is None:
            return ServiceResult.ok([])

        async def load() -> List[RecordData]:
            records = await self.repository.find_by_seller_id(parsed_id)
            return [serialize_record(record) for record in records]

        try:
            records = await self.cache.get_or_set(
                CacheKey.records_by_seller(parsed_id), load, self.ttl
            )
        except Exception as e:
            logger.error("Failed to fetch records", seller_id=str(parsed_id), error=str(e))
            return ServiceResult.fail("Failed to fetch records")

        return ServiceResult.ok(records)

    async def get_all_records(self) -> ServiceResult[List[RecordData]]:
        """Fetch every record, newest service date first."""

        async def load() -> List[RecordData]:
            records = await self.repository.find_all()
            return [serialize_record(record) for record in records]

        try:
            records = await self.cache.get_or_set(CacheKey.all_records(), load, self.ttl)
        except Exception as e:
            logger.error("Failed to fetch records", error=str(e))
            return ServiceResult.fail("Failed to fetch records")

        return ServiceResult.ok(records)

    async def update_record(
        self, record_id: IdLike, data: Mapping[str, Any]
    ) -> ServiceResult[RecordData]:
        """
        Apply a partial update.

        The existing record is read first to learn its seller for invalidation.
        """
        validation = validate_update_payload(data)
        if not validation.is_valid:
            return ServiceResult.fail(
                "Validation failed", [e.to_dict() for e in validation.errors]
            )

        parsed_id = parse_id(record_id)
        if parsed_id is None:
            return ServiceResult.fail("Record not found")

        with tracer.start_as_current_span("maintenance_record.update"):
            try:
                existing = await self.repository.find_by_id(parsed_id)
                if not existing:
                    return ServiceResult.fail("Record not found")
                seller_id = existing.seller_id

                record = await self.repository.update(parsed_id, validation.value.changes())
                if not record:
                    return ServiceResult.fail("Record not found")
                result = serialize_record(record)

                await self.repository.commit()
                await self._invalidate(seller_id, parsed_id)

                logger.info("Maintenance record updated", record_id=str(parsed_id))
                return ServiceResult.ok(result)

            except Exception as e:
                logger.error(
                    "Failed to update record", record_id=str(parsed_id), error=str(e)
                )
                return ServiceResult.fail("Failed to update record")

    async def delete_record(self, record_id: IdLike) -> ServiceResult[None]:
        """Delete a record and invalidate every cache entry that can hold it."""
        parsed_id = parse_id(record_id)
        if parsed_id is None:
            return ServiceResult.fail("Record not found")

        with tracer.start_as_current_span("maintenance_record.delete"):
            try:
                existing = await self.repository.find_by_id(parsed_id)
                if not existing:
                    return ServiceResult.fail("Record not found")
                seller_id = existing.seller_id

                deleted = await self.repository.delete(parsed_id)
                if not deleted:
                    return ServiceResult.fail("Record not found")

                await self.repository.commit()
                await self._invalidate(seller_id, parsed_id)

                logger.info("Maintenance record deleted", record_id=str(parsed_id))
                return ServiceResult.ok()

            except Exception as e:
                logger.error(
                    "Failed to delete record", record_id=str(parsed_id), error=str(e)
                )
                return ServiceResult.fail("Failed to delete record")

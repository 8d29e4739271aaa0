"""
Base Repository

Generic async CRUD over one SQLAlchemy model. Not-found is reported as
``None``/``False``; database failures are raised as ``RepositoryException``
after the session has been rolled back.
"""

from typing import Any, Optional, Type, Union
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from evmarket.models import Base
from .exceptions import RepositoryException

logger = structlog.get_logger()

IdLike = Union[UUID, str]


def parse_id(value: IdLike) -> Optional[UUID]:
    """Return value as a UUID, or None when it is not a valid identifier."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


class BaseRepository:
    """
    Base repository for a single model.

    Each repository subclass specifies its model type directly.
    """

    def __init__(self, session: AsyncSession, model: Type[Base]):
        """
        Bind the repository to one session and one mapped model.

        Raises:
            TypeError: If session is not an AsyncSession or model is unmapped
        """
        if not isinstance(session, AsyncSession):
            raise TypeError(f"Expected AsyncSession, got {type(session).__name__}")
        if getattr(model, "__tablename__", None) is None:
            raise TypeError(f"{model!r} is not a mapped model")

        self.session = session
        self.model = model

    async def _fail(
        self, operation: str, error: SQLAlchemyError, **context: Any
    ) -> RepositoryException:
        await self.session.rollback()
        logger.error(
            f"Repository: Failed to {operation} entity",
            model=self.model.__name__,
            error=str(error),
            exc_info=True,
            **context,
        )
        return RepositoryException(
            message=f"Failed to {operation} {self.model.__name__}",
            model=self.model.__name__,
            operation=operation,
            original_error=error,
        )

    async def commit(self) -> None:
        """Commit the session's pending writes so other sessions see them."""
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._fail("commit", e)

    async def get(self, id: IdLike) -> Optional[Base]:
        """
        Get entity by ID.

        Returns:
            Entity if found, None otherwise (including malformed ids)
        """
        entity_id = parse_id(id)
        if entity_id is None:
            return None

        try:
            entity = await self.session.get(self.model, entity_id)
        except SQLAlchemyError as e:
            raise await self._fail("get", e, entity_id=str(entity_id))

        if entity:
            logger.debug(
                "Repository: Entity retrieved",
                model=self.model.__name__,
                entity_id=str(entity_id),
            )
        return entity

    async def list(self, *where: Any, order_by: Any = None) -> list[Base]:
        """List entities matching the given criteria."""
        stmt = select(self.model).where(*where)
        if order_by is not None:
            stmt = stmt.order_by(order_by)

        try:
            result = await self.session.execute(stmt)
            entities = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise await self._fail("list", e)

        logger.debug(
            "Repository: Entities listed",
            model=self.model.__name__,
            count=len(entities),
        )
        return entities

    async def create(self, obj: Base) -> Base:
        """
        Persist a new entity.

        Returns:
            Created entity with ID and server defaults populated
        """
        if obj is None:
            raise ValueError("Entity object is required (cannot be None)")

        if not isinstance(obj, self.model):
            raise TypeError(
                f"Entity must be {self.model.__name__} instance, got {type(obj).__name__}"
            )

        try:
            self.session.add(obj)
            await self.session.flush()
            await self.session.refresh(obj)
        except SQLAlchemyError as e:
            raise await self._fail("create", e)

        logger.info(
            "Repository: Entity created",
            model=self.model.__name__,
            entity_id=str(obj.id),
        )
        return obj

    async def update(self, id: IdLike, values: dict[str, Any]) -> Optional[Base]:
        """
        Apply field values to an existing entity.

        Returns:
            Updated entity, or None if it does not exist
        """
        obj = await self.get(id)
        if obj is None:
            return None

        try:
            for field, value in values.items():
                setattr(obj, field, value)
            await self.session.flush()
            await self.session.refresh(obj)
        except SQLAlchemyError as e:
            raise await self._fail("update", e, entity_id=str(obj.id))

        logger.info(
            "Repository: Entity updated",
            model=self.model.__name__,
            entity_id=str(obj.id),
            fields=sorted(values),
        )
        return obj

    async def delete(self, id: IdLike) -> bool:
        """
        Delete entity.

        Returns:
            True if entity was deleted, False if not found
        """
        obj = await self.get(id)
        if obj is None:
            logger.warning(
                "Repository: Entity not found for deletion",
                model=self.model.__name__,
                entity_id=str(id),
            )
            return False

        try:
            await self.session.delete(obj)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise await self._fail("delete", e, entity_id=str(obj.id))

        logger.info(
            "Repository: Entity deleted",
            model=self.model.__name__,
            entity_id=str(obj.id),
        )
        return True

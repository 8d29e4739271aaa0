"""
Seller Repository

Owner lookups for records published by sellers.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from evmarket.models import Seller
from .base import BaseRepository, IdLike


class SellerRepository(BaseRepository):
    """Repository for ``Seller`` rows."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Seller)

    async def find_by_id(self, seller_id: IdLike) -> Optional[Seller]:
        """Return the seller, or None if no such seller exists."""
        return await self.get(seller_id)

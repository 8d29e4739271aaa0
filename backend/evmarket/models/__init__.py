"""
EV Marketplace Database Models

SQLAlchemy models for sellers and the maintenance records they publish.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Canonical Base class for all database models."""

    pass


class TimestampMixin:
    """Mixin for timestamp fields."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class Seller(Base, TimestampMixin):
    """Seller account that owns listings and maintenance records."""

    __tablename__ = "sellers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<Seller(id={self.id}, business_name={self.business_name})>"


class MaintenanceRecord(Base, TimestampMixin):
    """Vehicle maintenance record published by a seller."""

    __tablename__ = "maintenance_records"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    seller_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("sellers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_type: Mapped[str] = mapped_column(String(255), nullable=False)
    service_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    parts_replaced: Mapped[List[str]] = mapped_column(
        JSON, default=list, nullable=False
    )
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<MaintenanceRecord(id={self.id}, seller_id={self.seller_id}, "
            f"service_type={self.service_type})>"
        )


__all__ = ["Base", "TimestampMixin", "Seller", "MaintenanceRecord"]

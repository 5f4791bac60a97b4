"""Custom property rows in the hosted backend."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, Sequence, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

# Bumped on every insert or update; only PostgreSQL creates the sequence.
property_revision_seq = Sequence("properties_revision_seq")


class PropertyRecord(Base):
    """One custom listing, stored as an opaque JSON payload keyed by id."""

    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    data: Mapped[dict] = mapped_column(JSON().with_variant(JSONB, "postgresql"), default=dict, nullable=False)
    revision: Mapped[int] = mapped_column(BigInteger, property_revision_seq, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

"""Expose ORM models."""
from .base import Base
from .property import PropertyRecord

__all__ = [
    "Base",
    "PropertyRecord",
]

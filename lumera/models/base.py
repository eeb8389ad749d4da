"""Base models and mixins for database models"""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import DeclarativeBase, declared_attr
from sqlalchemy.sql import func
import uuid

# Create declarative base
class Base(DeclarativeBase):
    pass

def generate_id() -> str:
    """Opaque string identifier"""
    return str(uuid.uuid4())

class TimestampedModel:
    """Mixin for adding created_at and updated_at timestamps"""

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            index=True
        )

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            onupdate=func.now()
        )

class IDModel:
    """Mixin for adding a string UUID primary key"""

    @declared_attr
    def id(cls):
        return Column(
            String(64),
            primary_key=True,
            default=generate_id,
            nullable=False
        )

class ReprMixin:
    """Readable repr keyed by primary key"""

    def __repr__(self):
        class_name = self.__class__.__name__
        attributes = [
            f"{column.name}={getattr(self, column.name)!r}"
            for column in self.__table__.columns
            if column.primary_key
        ]
        return f"<{class_name}({', '.join(attributes)})>"

__all__ = [
    "Base",
    "TimestampedModel",
    "IDModel",
    "ReprMixin",
    "generate_id",
]

"""Declarative base and column mixins shared by the store tables"""

from sqlalchemy import Column, DateTime, Integer, Uuid
from sqlalchemy.orm import DeclarativeBase, declared_attr
from decimal import Decimal
from typing import Any, Dict, Iterable, List
import uuid

from tvmerch.utils.helpers import utcnow

class Base(DeclarativeBase):
    pass

class TimestampedModel:
    """created_at / updated_at, stored as naive UTC"""

    @declared_attr
    def created_at(cls):
        return Column(DateTime, nullable=False, default=utcnow, index=True)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

class UUIDModel:

    @declared_attr
    def id(cls):
        return Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

class VersionedModel:
    """Row version bumped by every conditional counter update"""

    @declared_attr
    def version(cls):
        return Column(Integer, nullable=False, default=1)

class SerializableModel:

    def to_dict(self) -> Dict[str, Any]:
        """
        Column values as plain Python data

        Money columns become floats; datetimes and UUIDs are left as is
        for pydantic to serialize.
        """
        return {
            column.name: float(value) if isinstance(value, Decimal) else value
            for column in self.__table__.columns
            for value in (getattr(self, column.name),)
        }

    def apply_changes(self, changes: Dict[str, Any], protected: Iterable[str] = ()) -> List[str]:
        """
        Copy ``changes`` onto mapped columns, skipping ``protected`` ones

        Returns the names of the columns whose value actually changed.
        """
        columns = set(self.__table__.columns.keys()) - set(protected)
        changed = []
        for key, value in changes.items():
            if key in columns and getattr(self, key) != value:
                setattr(self, key, value)
                changed.append(key)
        return changed

    def __repr__(self):
        keys = ", ".join(
            f"{c.name}={getattr(self, c.name)!r}" for c in self.__table__.primary_key.columns
        )
        return f"<{self.__class__.__name__}({keys})>"

__all__ = [
    'Base',
    'TimestampedModel',
    'UUIDModel',
    'VersionedModel',
    'SerializableModel',
]

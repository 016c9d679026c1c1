"""
Module: estimation_kernel.db.base
Responsibility: Declarative base for the kernel's ORM models: a UUID
    primary key on every table and audit timestamps on tracked tables.
Architecture position: Kernel > DB.  Imported by models/ and by the engine
    helpers; imports nothing from the rest of the kernel.

Invariants enforced:
    - Primary keys are uuid4 values stored as 36-character strings, so the
      default SQLite database and a PostgreSQL one hold identical rows.
    - created_at / updated_at are filled by the database, not by Python.
"""

from datetime import datetime
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """UUID column stored as its canonical string; string input is accepted."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(value if isinstance(value, UUID) else UUID(str(value)))

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    """Every mapped class gets ``id: UUID`` generated client-side."""

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
        UUID: UUIDString(),
    }

    id: Mapped[UUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """Abstract base adding database-maintained ``created_at`` / ``updated_at``."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
    )

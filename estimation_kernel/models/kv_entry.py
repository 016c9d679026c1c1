"""
Module: estimation_kernel.models.kv_entry
Responsibility: ORM persistence for flat JSON blobs keyed by a fixed name
    (for example the ``evmData`` inputs of the EVM calculator).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - key is unique: one current blob per key; writes replace the value.
    - value holds serialized JSON text; decoding happens in the store.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from estimation_kernel.db.base import TrackedBase


class KeyValueEntry(TrackedBase):
    """
    One named JSON blob.

    Non-goals:
        - No history is kept; the previous value is overwritten.
    """

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
    )

    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry {self.key}>"

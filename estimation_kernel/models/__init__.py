"""ORM models. Importing this package registers every table on Base.metadata."""

from estimation_kernel.models.kv_entry import KeyValueEntry

__all__ = ["KeyValueEntry"]

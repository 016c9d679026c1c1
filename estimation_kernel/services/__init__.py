"""Kernel services (flush-only persistence helpers)."""

from estimation_kernel.services.base import BaseService
from estimation_kernel.services.kv_store import KeyValueStore

__all__ = ["BaseService", "KeyValueStore"]

"""
KeyValueStore -- persisted JSON blobs keyed by name.

Responsibility:
    Reads and writes a single JSON document per key in ``kv_entries``.
    The EVM calculator stores its four inputs under ``evmData``; any other
    flat state the calculator chooses to persist uses the same table.

Architecture position:
    Kernel > Services -- imperative shell.  Flush-only, see BaseService.

Failure modes:
    - StoredPayloadError when a stored value cannot be decoded as JSON.
      The store never silently discards a corrupt row; callers decide
      whether to fall back to defaults.
"""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy import select

from estimation_kernel.exceptions import StoredPayloadError
from estimation_kernel.logging_config import get_logger
from estimation_kernel.models.kv_entry import KeyValueEntry
from estimation_kernel.services.base import BaseService

logger = get_logger("services.kv_store")


class KeyValueStore(BaseService[KeyValueEntry]):
    """JSON document store over the kv_entries table."""

    def _entry(self, key: str) -> KeyValueEntry | None:
        return self.session.execute(
            select(KeyValueEntry).where(KeyValueEntry.key == key)
        ).scalar_one_or_none()

    def get_json(self, key: str) -> Any | None:
        """
        Return the decoded document stored under ``key``.

        Returns:
            The decoded JSON value, or None when nothing is stored.

        Raises:
            StoredPayloadError: If the stored text is not valid JSON.
        """
        entry = self._entry(key)
        if entry is None:
            return None
        try:
            return json.loads(entry.value)
        except json.JSONDecodeError as exc:
            logger.warning(
                "stored_payload_invalid",
                extra={"key": key, "error": str(exc)},
            )
            raise StoredPayloadError(key, str(exc)) from exc

    def put_json(self, key: str, value: Any) -> None:
        """Insert or replace the document stored under ``key``."""
        text = json.dumps(value, sort_keys=True)
        entry = self._entry(key)
        if entry is None:
            self.session.add(KeyValueEntry(key=key, value=text))
        else:
            entry.value = text
        self.session.flush()
        logger.debug("stored_payload_written", extra={"key": key})

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True when a row was deleted."""
        entry = self._entry(key)
        if entry is None:
            return False
        self.session.delete(entry)
        self.session.flush()
        return True

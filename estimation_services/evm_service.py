"""
estimation_services.evm_service -- Persisted EVM inputs with derived metrics.

Responsibility:
    Load and save the four EVM inputs (``bac``, ``pv``, ``ev``, ``ac``) as a
    single JSON document under a fixed key, and expose the metrics derived
    from them.  Metrics are recomputed on every read and never stored.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Receives a ``KeyValueStore`` by constructor injection; the caller owns
    the session and the transaction.

Failure modes:
    - StoredPayloadError when the stored document is not valid JSON, is
      not an object, or lacks one of the four inputs.
"""

from __future__ import annotations

from estimation_config.bridges import build_evm_defaults
from estimation_config.schema import EstimationConfig
from estimation_engines.evm import calculate_evm_metrics
from estimation_kernel.domain import EVMData, EVMMetrics
from estimation_kernel.domain.evm import EVM_FIELDS
from estimation_kernel.exceptions import StoredPayloadError
from estimation_kernel.logging_config import get_logger
from estimation_kernel.services.kv_store import KeyValueStore

logger = get_logger("services.evm")

DEFAULT_EVM_KEY = "evmData"
DEFAULT_EVM_DATA = EVMData(bac=1_000_000, pv=600_000, ev=550_000, ac=580_000)


class EVMDataService:
    """
    Explicit replacement for a global EVM state container.

    Contract:
        ``load()`` returns the stored inputs, or ``defaults`` when nothing
        is stored.  ``update()`` writes through to the store (flush only).
    """

    def __init__(
        self,
        store: KeyValueStore,
        evm_key: str = DEFAULT_EVM_KEY,
        defaults: EVMData = DEFAULT_EVM_DATA,
    ):
        self._store = store
        self._key = evm_key
        self._defaults = defaults

    @classmethod
    def from_config(cls, store: KeyValueStore, config: EstimationConfig) -> EVMDataService:
        return cls(store, evm_key=config.storage.evm_key, defaults=build_evm_defaults(config))

    def load(self) -> EVMData:
        payload = self._store.get_json(self._key)
        if payload is None:
            return self._defaults
        if not isinstance(payload, dict):
            raise StoredPayloadError(self._key, "expected a JSON object")
        missing = [name for name in EVM_FIELDS if name not in payload]
        if missing:
            raise StoredPayloadError(self._key, f"missing fields: {', '.join(missing)}")
        try:
            return EVMData.from_dict(payload)
        except (TypeError, ValueError) as exc:
            raise StoredPayloadError(self._key, str(exc)) from exc

    def update(self, data: EVMData) -> EVMMetrics:
        """Persist new inputs and return the metrics derived from them."""
        self._store.put_json(self._key, data.to_dict())
        logger.info("evm_data_saved", extra={"key": self._key, **data.to_dict()})
        return calculate_evm_metrics(data)

    def reset(self) -> EVMData:
        """Forget stored inputs; ``load`` returns the defaults afterwards."""
        self._store.delete(self._key)
        return self._defaults

    @property
    def metrics(self) -> EVMMetrics:
        return calculate_evm_metrics(self.load())

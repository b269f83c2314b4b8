# -*- encoding: utf-8 -*-
"""
BaseRecordRegistry - Shared plumbing for the authority and schema registries.

Provides:
- Store wiring (any RecordStore; in-memory by default)
- Event sink wiring with safe emission
- Resolution by exact key or unique key prefix
- Listing

Subclasses implement their own mutations (register_schema, set_verified)
explicitly; the base class offers helpers rather than template methods.

Usage:
    class MyRegistry(BaseRecordRegistry[MyRecord]):
        def create(self, key, **kwargs):
            record = MyRecord(...)
            self._store.create(key, record)
            self._emit(MySignal(...))
            return record
"""

import logging
from typing import Any, Generic, List, Optional, TypeVar

from .config import RegistryConfig
from .events import EventSink, NullEventSink
from .store import InMemoryRecordStore, RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRecordRegistry(Generic[T]):
    """
    Lean base class for record registries.

    Holds the store, the sink and the configuration. Performs no locking of
    its own: the store is responsible for atomic create-if-absent.
    """

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        sink: Optional[EventSink] = None,
        config: Optional[RegistryConfig] = None,
    ):
        self._store = store if store is not None else InMemoryRecordStore()
        self._sink = sink if sink is not None else NullEventSink()
        self._config = config or RegistryConfig()

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def store(self) -> RecordStore:
        return self._store

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------

    def set_event_sink(self, sink: EventSink) -> None:
        """Replace the event sink (e.g. attach an indexer after startup)."""
        self._sink = sink

    def _emit(self, signal: Any) -> None:
        """Emit a signal after a committed mutation.

        The mutation has already happened, so a failing sink is logged and
        otherwise ignored.
        """
        try:
            self._sink.emit(signal.name, signal.to_dict())
        except Exception as e:
            logger.warning(f"Event emission failed for {signal.name}: {e}")

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[T]:
        """Exact lookup."""
        return self._store.get(key)

    def resolve(self, identifier: str) -> Optional[T]:
        """
        Resolve by exact key, then by key prefix.

        A prefix resolves only when exactly one stored key starts with it.
        """
        if not identifier:
            return None

        record = self._store.get(identifier)
        if record is not None:
            return record

        matches = [key for key in self._store.keys() if key.startswith(identifier)]
        if len(matches) == 1:
            return self._store.get(matches[0])
        if len(matches) > 1:
            logger.debug(f"Ambiguous {self._entity_label} prefix {identifier}: {len(matches)} matches")
        return None

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_all(self) -> List[T]:
        records = []
        for key in self._store.keys():
            record = self._store.get(key)
            if record is not None:
                records.append(record)
        return records

    def __len__(self) -> int:
        return len(self._store.keys())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def _entity_label(self) -> str:
        """Label for log messages (e.g. 'schema', 'authority')."""
        name = type(self).__name__
        if name.endswith("Registry"):
            return name[: -len("Registry")].lower()
        return name.lower()

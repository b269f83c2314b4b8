# -*- encoding: utf-8 -*-
"""
Event Sinks - Observable signals for indexers and UIs.

Registries announce state changes through an injected EventSink. Emission is
fire-and-forget: the sink acknowledges nothing, and delivery guarantees belong
to whatever transport sits behind it.

Signals:
    VerifiedAuthorityChanged {authority, is_verified}   (post-state)
    SchemaRegistered         {uid, deployer}

Usage:
    sink = MemoryEventSink()
    registry = SchemaRegistry(sink=sink)
    registry.register_schema(deployer, content)
    assert sink.names() == ["SchemaRegistered"]
"""

import logging
import threading
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

VERIFIED_AUTHORITY_CHANGED = "VerifiedAuthorityChanged"
SCHEMA_REGISTERED = "SchemaRegistered"


@dataclass(frozen=True)
class VerifiedAuthorityChanged:
    authority: str
    is_verified: bool

    name = VERIFIED_AUTHORITY_CHANGED

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SchemaRegistered:
    uid: str
    deployer: str

    name = SCHEMA_REGISTERED

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class EventSink(Protocol):
    """Notification channel with a single fire-and-forget operation."""

    def emit(self, signal_name: str, payload: Dict[str, Any]) -> None:
        ...


class NullEventSink:
    """Discards every signal."""

    def emit(self, signal_name: str, payload: Dict[str, Any]) -> None:
        return


class MemoryEventSink:
    """
    Captures signals in emission order.

    Used by tests to assert on payloads instead of a live subscription.
    """

    def __init__(self):
        self._events: List[Tuple[str, Dict[str, Any]]] = []
        self._lock = threading.Lock()

    def emit(self, signal_name: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            self._events.append((signal_name, dict(payload)))

    @property
    def events(self) -> List[Tuple[str, Dict[str, Any]]]:
        with self._lock:
            return list(self._events)

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def payloads(self, signal_name: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            payload for name, payload in self.events
            if signal_name is None or name == signal_name
        ]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


class LoggingEventSink:
    """Writes each signal to a logger (default: this module's)."""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.INFO):
        self._log = log or logger
        self._level = level

    def emit(self, signal_name: str, payload: Dict[str, Any]) -> None:
        self._log.log(self._level, f"{signal_name}: {payload}")

# -*- encoding: utf-8 -*-
"""
Record Stores - Key-value persistence behind the registries.

The registries only need get/put keyed by identity or derived uid, plus an
atomic create-if-absent so that of two racing creations at one key only one
commits. Two implementations:

- InMemoryRecordStore: dict guarded by a lock (tests, embedded hosts)
- FileRecordStore: one JSON file per record, keyed by qb64

Storage layout (FileRecordStore):
    <root>/
    ├── {uid}.json          # SchemaData records
    └── ...

Records stored in a FileRecordStore must provide to_dict() and a
from_dict() classmethod.
"""

import copy
import json
import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, Protocol, Type, TypeVar, Union

from .errors import AlreadyExists, InvalidInput

logger = logging.getLogger(__name__)

T = TypeVar("T")

# qb64 alphabet (base64url); also keeps keys from escaping the store root
_KEY_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


class RecordStore(Protocol[T]):
    """Persistence interface consumed by the registries."""

    def get(self, key: str) -> Optional[T]:
        ...

    def put(self, key: str, record: T) -> None:
        ...

    def create(self, key: str, record: T) -> None:
        """Store record only if key is absent; raise AlreadyExists otherwise."""
        ...

    def contains(self, key: str) -> bool:
        ...

    def keys(self) -> List[str]:
        ...


class InMemoryRecordStore(Generic[T]):
    """
    Thread-safe in-memory store.

    Records are copied in and out, so a record handed to or returned by the
    store is never the stored object itself.
    """

    def __init__(self):
        self._records: Dict[str, T] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            record = self._records.get(key)
        return copy.copy(record) if record is not None else None

    def put(self, key: str, record: T) -> None:
        with self._lock:
            self._records[key] = copy.copy(record)

    def create(self, key: str, record: T) -> None:
        with self._lock:
            if key in self._records:
                raise AlreadyExists(key)
            self._records[key] = copy.copy(record)

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._records

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class FileRecordStore(Generic[T]):
    """
    JSON-file store: one `{key}.json` per record under root.

    Records are written to a temp file first and then published under their
    key, so a reader never sees a partial record. create() publishes with
    os.link, which fails if the key exists: concurrent creators (threads or
    processes) at the same key cannot both commit. put() publishes with
    os.replace.
    """

    def __init__(self, root: Union[str, Path], record_type: Type[T]):
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)
        self._record_type = record_type

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        if not isinstance(key, str) or not _KEY_PATTERN.fullmatch(key):
            raise InvalidInput("key", f"not a storable key: {key!r}")
        return self._root / f"{key}.json"

    @staticmethod
    def _encode(record: Any) -> str:
        return json.dumps(record.to_dict(), sort_keys=True, indent=2) + "\n"

    def get(self, key: str) -> Optional[T]:
        path = self._path(key)
        if not path.exists():
            return None
        return self._record_type.from_dict(json.loads(path.read_text()))

    def _write_temp(self, record: Any) -> str:
        """Write the encoded record to a fresh temp file under root; return its path."""
        data = self._encode(record)
        fd, tmp = tempfile.mkstemp(dir=self._root, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(data)
        except BaseException:
            os.unlink(tmp)
            raise
        return tmp

    def put(self, key: str, record: T) -> None:
        path = self._path(key)
        tmp = self._write_temp(record)
        try:
            os.replace(tmp, path)
        except BaseException:
            os.unlink(tmp)
            raise

    def create(self, key: str, record: T) -> None:
        path = self._path(key)
        tmp = self._write_temp(record)
        try:
            os.link(tmp, path)
        except FileExistsError:
            raise AlreadyExists(key) from None
        finally:
            os.unlink(tmp)
        logger.debug(f"Created {path.name}")

    def contains(self, key: str) -> bool:
        return self._path(key).exists()

    def keys(self) -> List[str]:
        return sorted(p.stem for p in self._root.glob("*.json"))

    def __len__(self) -> int:
        return len(self.keys())

# -*- encoding: utf-8 -*-
"""
Schema Registry - Append-only, content-addressed schema records.

A schema is published once. Its uid is derived from the deployer and the
schema content, so re-publishing identical content from the same deployer
lands on the same uid and is rejected rather than overwritten. There is no
update, rotate, deprecate or delete: attestations issued against a uid keep
meaning exactly what they meant when issued.

Usage:
    registry = SchemaRegistry(sink=MemoryEventSink())

    schema = registry.register_schema(
        deployer=issuer_aid,
        schema='{"name": "example", "type": "object"}',
        resolver=None,
        revocable=True,
        levy=LevyPolicy(amount=1_000, recipient=treasury_aid),
    )

    registry.resolve(schema.uid)
    registry.list_schemas(deployer=issuer_aid)
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..base_registry import BaseRecordRegistry
from ..config import RegistryConfig
from ..errors import AlreadyExists, InvalidInput
from ..events import EventSink, SchemaRegistered
from ..identifiers import derive_identifier, validate_identity, validate_optional_identity
from ..levy import LevyPolicy
from ..store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaData:
    """
    A published schema. Immutable once created.

    resolver None means no verification delegate (always accept).
    levy None means no fee.
    """
    uid: str
    schema: str
    deployer: str
    revocable: bool
    resolver: Optional[str] = None
    levy: Optional[LevyPolicy] = None

    @property
    def has_resolver(self) -> bool:
        return self.resolver is not None

    def levy_due(self) -> Optional[LevyPolicy]:
        """Levy to collect per use, or None when there is nothing to charge.

        An absent levy and a zero-amount levy are treated identically.
        """
        if self.levy is None or self.levy.is_free:
            return None
        return self.levy

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "schema": self.schema,
            "resolver": self.resolver,
            "revocable": self.revocable,
            "deployer": self.deployer,
            "levy": self.levy.to_dict() if self.levy else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaData":
        levy = data.get("levy")
        return cls(
            uid=data["uid"],
            schema=data["schema"],
            deployer=data["deployer"],
            revocable=data["revocable"],
            resolver=data.get("resolver"),
            levy=LevyPolicy.from_dict(levy) if levy else None,
        )


class SchemaRegistry(BaseRecordRegistry[SchemaData]):
    """
    Registry of published schemas keyed by derived uid.

    Supports:
    - Registration with derived uid (create only)
    - Resolution by uid or unique uid prefix
    - Listing, optionally by deployer
    """

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        sink: Optional[EventSink] = None,
        config: Optional[RegistryConfig] = None,
    ):
        super().__init__(store=store, sink=sink, config=config)

    def _validate_schema(self, schema: Any) -> str:
        if not isinstance(schema, str):
            raise InvalidInput("schema", f"expected a string, got {type(schema).__name__}")
        if not schema:
            raise InvalidInput("schema", "must not be empty")
        try:
            size = len(schema.encode("utf-8"))
        except UnicodeEncodeError as e:
            raise InvalidInput("schema", "not valid UTF-8") from e
        if size > self._config.max_schema_bytes:
            raise InvalidInput(
                "schema",
                f"{size} bytes exceeds limit of {self._config.max_schema_bytes}",
            )
        return schema

    def derive_uid(self, deployer: str, schema: str) -> str:
        """Compute the uid a registration would get, without writing."""
        validate_identity(deployer, "deployer", size=self._config.identity_size)
        self._validate_schema(schema)
        return derive_identifier(deployer, schema)

    def register_schema(
        self,
        deployer: str,
        schema: str,
        resolver: Optional[str] = None,
        revocable: bool = True,
        levy: Optional[LevyPolicy] = None,
    ) -> SchemaData:
        """
        Publish a new schema.

        Args:
            deployer: Identity of the caller; stamped as the record's deployer
            schema: Schema content (opaque, non-empty, size-bounded)
            resolver: Optional verification delegate identity
            revocable: Whether attestations against this schema may be revoked
            levy: Optional usage fee

        Returns:
            The created SchemaData

        Raises:
            InvalidInput: malformed deployer/resolver/levy, empty or oversized schema
            AlreadyExists: this deployer already published this content
        """
        size = self._config.identity_size
        validate_identity(deployer, "deployer", size=size)
        self._validate_schema(schema)
        validate_optional_identity(resolver, "resolver", size=size)
        if not isinstance(revocable, bool):
            raise InvalidInput("revocable", f"expected a bool, got {revocable!r}")
        if levy is not None:
            if not isinstance(levy, LevyPolicy):
                raise InvalidInput("levy", f"expected a LevyPolicy, got {type(levy).__name__}")
            levy.validate(self._config)

        uid = derive_identifier(deployer, schema)

        if self._store.contains(uid):
            logger.debug(f"Duplicate schema registration rejected: {uid}")
            raise AlreadyExists(uid)

        record = SchemaData(
            uid=uid,
            schema=schema,
            deployer=deployer,
            revocable=revocable,
            resolver=resolver,
            levy=levy,
        )
        # Atomic create-if-absent; a concurrent registration of the same
        # content raises AlreadyExists here
        self._store.create(uid, record)

        logger.info(f"Registered schema {uid[:16]}... by {deployer[:16]}...")
        self._emit(SchemaRegistered(uid=uid, deployer=deployer))
        return record

    def list_schemas(self, deployer: Optional[str] = None) -> List[SchemaData]:
        """List all schemas, optionally filtered by deployer."""
        schemas = self.list_all()
        if deployer:
            schemas = [s for s in schemas if s.deployer == deployer]
        return schemas


# Module-level singleton
_registry: Optional[SchemaRegistry] = None
_registry_lock = threading.Lock()


def get_schema_registry(
    store: Optional[RecordStore] = None,
    sink: Optional[EventSink] = None,
    config: Optional[RegistryConfig] = None,
) -> SchemaRegistry:
    """Get the schema registry singleton.

    Arguments only take effect on the call that creates the singleton.
    """
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = SchemaRegistry(store=store, sink=sink, config=config)
        return _registry


def reset_schema_registry():
    """Reset the registry (for testing)."""
    global _registry
    with _registry_lock:
        _registry = None

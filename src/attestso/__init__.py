# -*- encoding: utf-8 -*-
"""
attestso - Access-controlled registry core for an attestation platform.

Two registries, each owning its records exclusively:

    ┌─────────────────────────────────────────────────────────┐
    │                 SchemaRegistry                          │
    │  register_schema: uid = derive(deployer, content)       │
    │  append-only; duplicate uid → AlreadyExists             │
    │  emits SchemaRegistered{uid, deployer}                  │
    └─────────────────────────────────────────────────────────┘
    ┌─────────────────────────────────────────────────────────┐
    │                 AuthorityRegistry                       │
    │  set_verified: administrator only (AdminGate)           │
    │  emits VerifiedAuthorityChanged{authority, is_verified} │
    └─────────────────────────────────────────────────────────┘

The registries never call each other. Consumers check
AuthorityRegistry.is_verified(deployer) before honoring a deployer's schema.

Usage:
    from attestso import (
        AuthorityRegistry,
        LevyPolicy,
        MemoryEventSink,
        RegistryConfig,
        SchemaRegistry,
    )

    config = RegistryConfig(admin=ADMIN_AID)
    sink = MemoryEventSink()

    schemas = SchemaRegistry(sink=sink, config=config)
    authorities = AuthorityRegistry(sink=sink, config=config)

    schema = schemas.register_schema(
        deployer=issuer_aid,
        schema='{"name": "example", "type": "object"}',
        revocable=True,
        levy=LevyPolicy(amount=500, recipient=treasury_aid),
    )

    record = authorities.find_or_create(issuer_aid)
    authorities.set_verified(record, caller=ADMIN_AID, is_verified=True)
"""

__version__ = "0.1.0"

from attestso.errors import (
    AttestsoError,
    Unauthorized,
    AlreadyExists,
    InvalidInput,
    RecordNotFound,
)

from attestso.config import (
    RegistryConfig,
    MAX_SCHEMA_BYTES,
    MAX_LEVY_AMOUNT,
)

from attestso.identifiers import (
    derive_identifier,
    validate_identity,
    SCHEMA_UID_CONTEXT,
    IDENTITY_SIZE,
)

from attestso.levy import LevyPolicy

from attestso.events import (
    EventSink,
    NullEventSink,
    MemoryEventSink,
    LoggingEventSink,
    VerifiedAuthorityChanged,
    SchemaRegistered,
    VERIFIED_AUTHORITY_CHANGED,
    SCHEMA_REGISTERED,
)

from attestso.store import (
    RecordStore,
    InMemoryRecordStore,
    FileRecordStore,
)

from attestso.governance import AdminGate

from attestso.authority import (
    AuthorityRecord,
    AuthorityRegistry,
)

from attestso.schemas import (
    SchemaData,
    SchemaRegistry,
    get_schema_registry,
    reset_schema_registry,
)

__all__ = [
    "__version__",
    # Errors
    "AttestsoError",
    "Unauthorized",
    "AlreadyExists",
    "InvalidInput",
    "RecordNotFound",
    # Config
    "RegistryConfig",
    "MAX_SCHEMA_BYTES",
    "MAX_LEVY_AMOUNT",
    # Identifiers
    "derive_identifier",
    "validate_identity",
    "SCHEMA_UID_CONTEXT",
    "IDENTITY_SIZE",
    # Levy
    "LevyPolicy",
    # Events
    "EventSink",
    "NullEventSink",
    "MemoryEventSink",
    "LoggingEventSink",
    "VerifiedAuthorityChanged",
    "SchemaRegistered",
    "VERIFIED_AUTHORITY_CHANGED",
    "SCHEMA_REGISTERED",
    # Stores
    "RecordStore",
    "InMemoryRecordStore",
    "FileRecordStore",
    # Governance
    "AdminGate",
    # Registries
    "AuthorityRecord",
    "AuthorityRegistry",
    "SchemaData",
    "SchemaRegistry",
    "get_schema_registry",
    "reset_schema_registry",
]

# -*- encoding: utf-8 -*-
"""
Tests for SchemaRegistry - append-only, content-addressed schemas.

Verifies:
- Registration with derived uid and stamped deployer
- Duplicate rejection (AlreadyExists) without overwrite
- Schema size bounds (empty, at bound, one byte over)
- Levy and resolver association
- SchemaRegistered signals
- Resolution, listing and the module singleton
"""

import threading
from unittest.mock import MagicMock

import pytest

from attestso.config import RegistryConfig
from attestso.errors import AlreadyExists, AttestsoError, InvalidInput
from attestso.events import SCHEMA_REGISTERED, MemoryEventSink
from attestso.identifiers import derive_identifier
from attestso.levy import LevyPolicy
from attestso.schemas import (
    SchemaData,
    SchemaRegistry,
    get_schema_registry,
    reset_schema_registry,
)
from attestso.store import FileRecordStore


SAMPLE_SCHEMA = '{"name": "example", "type": "object"}'


@pytest.fixture
def sink():
    return MemoryEventSink()


@pytest.fixture
def registry(sink):
    return SchemaRegistry(sink=sink)


class TestRegisterSchema:
    """Test schema registration."""

    def test_register(self, registry, deployer_aid):
        schema = registry.register_schema(
            deployer=deployer_aid,
            schema=SAMPLE_SCHEMA,
            resolver=None,
            revocable=True,
        )

        assert schema.uid == derive_identifier(deployer_aid, SAMPLE_SCHEMA)
        assert schema.schema == SAMPLE_SCHEMA
        assert schema.deployer == deployer_aid
        assert schema.resolver is None
        assert not schema.has_resolver
        assert schema.revocable is True
        assert schema.levy is None
        assert registry.get(schema.uid) == schema

    def test_signal_emitted(self, registry, deployer_aid, sink):
        schema = registry.register_schema(deployer_aid, SAMPLE_SCHEMA)
        assert sink.events == [
            (SCHEMA_REGISTERED, {"uid": schema.uid, "deployer": deployer_aid}),
        ]

    def test_non_revocable(self, registry, deployer_aid):
        schema = registry.register_schema(deployer_aid, SAMPLE_SCHEMA, revocable=False)
        assert schema.revocable is False

    def test_with_resolver(self, registry, deployer_aid, make_aid):
        resolver = make_aid("resolver-program")
        schema = registry.register_schema(deployer_aid, SAMPLE_SCHEMA, resolver=resolver)
        assert schema.resolver == resolver
        assert schema.has_resolver

    def test_resolver_does_not_change_uid(self, registry, deployer_aid, make_aid):
        schema = registry.register_schema(
            deployer_aid, SAMPLE_SCHEMA, resolver=make_aid("resolver-program"),
        )
        assert schema.uid == registry.derive_uid(deployer_aid, SAMPLE_SCHEMA)

    def test_immutable(self, registry, deployer_aid, other_aid):
        schema = registry.register_schema(deployer_aid, SAMPLE_SCHEMA)
        with pytest.raises(AttributeError):
            schema.deployer = other_aid
        assert not hasattr(registry, "update_schema")
        assert not hasattr(registry, "delete")

    def test_same_content_different_deployers(self, registry, deployer_aid, other_aid):
        a = registry.register_schema(deployer_aid, SAMPLE_SCHEMA)
        b = registry.register_schema(other_aid, SAMPLE_SCHEMA)
        assert a.uid != b.uid
        assert len(registry) == 2


class TestDuplicates:
    """Re-registering identical (deployer, content) is rejected."""

    def test_second_registration_rejected(self, registry, deployer_aid, sink):
        first = registry.register_schema(deployer_aid, SAMPLE_SCHEMA, revocable=True)

        with pytest.raises(AlreadyExists) as exc_info:
            registry.register_schema(deployer_aid, SAMPLE_SCHEMA, revocable=False)

        assert exc_info.value.key == first.uid
        assert len(registry) == 1
        assert registry.get(first.uid).revocable is True
        assert sink.names() == [SCHEMA_REGISTERED]

    def test_concurrent_registrations_commit_once(self, registry, deployer_aid, sink):
        wins, losses = [], []

        def do_register():
            try:
                wins.append(registry.register_schema(deployer_aid, SAMPLE_SCHEMA))
            except AlreadyExists:
                losses.append(1)

        threads = [threading.Thread(target=do_register) for _ in range(12)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(wins) == 1
        assert len(losses) == 11
        assert len(registry) == 1
        assert len(sink.events) == 1


class TestSchemaBounds:
    """Empty, at-bound and over-bound schema content."""

    def test_empty_rejected(self, registry, deployer_aid, sink):
        with pytest.raises(InvalidInput, match="schema"):
            registry.register_schema(deployer_aid, "")
        assert len(registry) == 0
        assert sink.events == []

    def test_at_bound_accepted(self, registry, deployer_aid):
        schema = registry.register_schema(deployer_aid, "x" * 200)
        assert len(schema.schema) == 200

    def test_one_over_bound_rejected(self, registry, deployer_aid):
        with pytest.raises(InvalidInput, match="201 bytes"):
            registry.register_schema(deployer_aid, "x" * 201)
        assert len(registry) == 0

    def test_bound_counts_utf8_bytes(self, registry, deployer_aid):
        registry.register_schema(deployer_aid, "é" * 100)  # 200 bytes
        with pytest.raises(InvalidInput):
            registry.register_schema(deployer_aid, "é" * 101)  # 202 bytes

    def test_unencodable_rejected(self, registry, deployer_aid, sink):
        with pytest.raises(InvalidInput, match="not valid UTF-8"):
            registry.register_schema(deployer_aid, "\ud800")
        assert len(registry) == 0
        assert sink.events == []

    def test_unencodable_is_registry_error(self, registry, deployer_aid):
        with pytest.raises(AttestsoError):
            registry.register_schema(deployer_aid, "schema \udfff")

    def test_configured_bound(self, deployer_aid):
        registry = SchemaRegistry(config=RegistryConfig(max_schema_bytes=1024))
        registry.register_schema(deployer_aid, "x" * 1024)
        with pytest.raises(InvalidInput):
            registry.register_schema(deployer_aid, "y" * 1025)

    def test_non_string_rejected(self, registry, deployer_aid):
        with pytest.raises(InvalidInput, match="schema"):
            registry.register_schema(deployer_aid, {"type": "object"})


class TestInputValidation:

    def test_malformed_deployer(self, registry):
        with pytest.raises(InvalidInput, match="deployer"):
            registry.register_schema("alice", SAMPLE_SCHEMA)

    def test_malformed_resolver(self, registry, deployer_aid):
        with pytest.raises(InvalidInput, match="resolver"):
            registry.register_schema(deployer_aid, SAMPLE_SCHEMA, resolver="contract")
        assert len(registry) == 0

    def test_non_bool_revocable(self, registry, deployer_aid):
        with pytest.raises(InvalidInput, match="revocable"):
            registry.register_schema(deployer_aid, SAMPLE_SCHEMA, revocable="yes")

    def test_levy_must_be_policy(self, registry, deployer_aid, other_aid):
        with pytest.raises(InvalidInput, match="levy"):
            registry.register_schema(
                deployer_aid, SAMPLE_SCHEMA, levy={"amount": 1, "recipient": other_aid},
            )

    def test_invalid_levy_writes_nothing(self, registry, deployer_aid, other_aid, sink):
        with pytest.raises(InvalidInput, match="levy.amount"):
            registry.register_schema(
                deployer_aid, SAMPLE_SCHEMA, levy=LevyPolicy(amount=-5, recipient=other_aid),
            )
        assert len(registry) == 0
        assert sink.events == []


class TestLevy:
    """Levy association and the no-fee encodings."""

    def test_levy_embedded(self, registry, deployer_aid, other_aid, make_aid):
        levy = LevyPolicy(amount=1_000, recipient=other_aid, asset=make_aid("usdc"))
        schema = registry.register_schema(deployer_aid, SAMPLE_SCHEMA, levy=levy)
        assert schema.levy == levy
        assert schema.levy_due() == levy

    def test_absent_and_zero_levy_both_accepted(self, registry, deployer_aid, other_aid):
        absent = registry.register_schema(deployer_aid, '{"v": 1}', levy=None)
        zero = registry.register_schema(
            deployer_aid, '{"v": 2}', levy=LevyPolicy(amount=0, recipient=other_aid),
        )

        assert absent.levy is None
        assert zero.levy == LevyPolicy(amount=0, recipient=other_aid)
        assert absent.levy_due() is None
        assert zero.levy_due() is None


class TestResolution:

    def test_resolve_by_uid_and_prefix(self, registry, deployer_aid):
        schema = registry.register_schema(deployer_aid, SAMPLE_SCHEMA)
        assert registry.resolve(schema.uid) == schema
        assert registry.resolve(schema.uid[:20]) == schema

    def test_resolve_missing(self, registry):
        assert registry.resolve("ENOTHING") is None
        assert registry.resolve("") is None

    def test_ambiguous_prefix(self, registry, deployer_aid):
        registry.register_schema(deployer_aid, '{"v": 1}')
        registry.register_schema(deployer_aid, '{"v": 2}')
        assert registry.resolve("E") is None

    def test_list_by_deployer(self, registry, deployer_aid, other_aid):
        registry.register_schema(deployer_aid, '{"v": 1}')
        registry.register_schema(deployer_aid, '{"v": 2}')
        registry.register_schema(other_aid, '{"v": 1}')

        assert len(registry.list_schemas()) == 3
        mine = registry.list_schemas(deployer=deployer_aid)
        assert len(mine) == 2
        assert all(s.deployer == deployer_aid for s in mine)

    def test_derive_uid_does_not_write(self, registry, deployer_aid, sink):
        uid = registry.derive_uid(deployer_aid, SAMPLE_SCHEMA)
        assert uid == derive_identifier(deployer_aid, SAMPLE_SCHEMA)
        assert len(registry) == 0
        assert sink.events == []


class TestSinkFailure:

    def test_registration_survives_sink_error(self, deployer_aid):
        sink = MagicMock()
        sink.emit.side_effect = RuntimeError("indexer down")
        registry = SchemaRegistry(sink=sink)

        schema = registry.register_schema(deployer_aid, SAMPLE_SCHEMA)

        assert registry.get(schema.uid) == schema
        sink.emit.assert_called_once()

    def test_set_event_sink(self, registry, deployer_aid):
        late = MemoryEventSink()
        registry.set_event_sink(late)
        registry.register_schema(deployer_aid, SAMPLE_SCHEMA)
        assert late.names() == [SCHEMA_REGISTERED]


class TestFileBacked:

    def test_duplicate_detected_after_reopen(self, tmp_path, deployer_aid, other_aid):
        levy = LevyPolicy(amount=3, recipient=other_aid)
        first = SchemaRegistry(store=FileRecordStore(tmp_path, SchemaData))
        schema = first.register_schema(deployer_aid, SAMPLE_SCHEMA, levy=levy)

        reopened = SchemaRegistry(store=FileRecordStore(tmp_path, SchemaData))
        assert reopened.get(schema.uid) == schema
        with pytest.raises(AlreadyExists):
            reopened.register_schema(deployer_aid, SAMPLE_SCHEMA)


class TestSingleton:

    def test_singleton(self):
        assert get_schema_registry() is get_schema_registry()

    def test_reset(self, deployer_aid):
        registry = get_schema_registry()
        registry.register_schema(deployer_aid, SAMPLE_SCHEMA)
        reset_schema_registry()
        assert len(get_schema_registry()) == 0

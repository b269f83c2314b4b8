# -*- encoding: utf-8 -*-
"""
Shared fixtures: deterministic KERI identities for registry tests.
"""

import pytest

from keri.core.signing import Salter

from attestso.schemas import reset_schema_registry

SALT = b"attestso-tests-0"  # Salt_128 needs exactly 16 bytes


@pytest.fixture
def make_aid():
    """Factory: name -> qb64 Ed25519 verification key (32 raw bytes)."""
    salter = Salter(raw=SALT)

    def _make(name: str) -> str:
        return salter.signer(path=name, temp=True).verfer.qb64

    return _make


@pytest.fixture
def admin_aid(make_aid):
    return make_aid("admin")


@pytest.fixture
def deployer_aid(make_aid):
    return make_aid("deployer")


@pytest.fixture
def other_aid(make_aid):
    return make_aid("other")


@pytest.fixture(autouse=True)
def _reset_singletons():
    reset_schema_registry()
    yield
    reset_schema_registry()

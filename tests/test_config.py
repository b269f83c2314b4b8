# -*- encoding: utf-8 -*-
"""
Tests for RegistryConfig.
"""

import json

import pytest

from attestso.config import MAX_LEVY_AMOUNT, MAX_SCHEMA_BYTES, RegistryConfig
from attestso.errors import InvalidInput


class TestDefaults:

    def test_reference_layout_bounds(self):
        config = RegistryConfig()
        assert config.admin is None
        assert config.max_schema_bytes == MAX_SCHEMA_BYTES == 200
        assert config.identity_size == 32
        assert config.max_levy_amount == MAX_LEVY_AMOUNT == 2**64 - 1


class TestValidation:

    @pytest.mark.parametrize("field", ["max_schema_bytes", "identity_size", "max_levy_amount"])
    @pytest.mark.parametrize("value", [0, -1, "200", True])
    def test_bounds_must_be_positive_ints(self, field, value):
        with pytest.raises(InvalidInput, match=field):
            RegistryConfig(**{field: value})

    def test_admin_must_be_identity(self):
        with pytest.raises(InvalidInput, match="admin"):
            RegistryConfig(admin="root")

    def test_admin_accepted(self, admin_aid):
        assert RegistryConfig(admin=admin_aid).admin == admin_aid


class TestLoading:

    def test_dict_roundtrip(self, admin_aid):
        config = RegistryConfig(admin=admin_aid, max_schema_bytes=512)
        assert RegistryConfig.from_dict(config.to_dict()) == config

    def test_unknown_keys_rejected(self):
        with pytest.raises(InvalidInput, match="unknown keys"):
            RegistryConfig.from_dict({"max_schema_bytes": 10, "colour": "blue"})

    def test_from_file(self, tmp_path, admin_aid):
        path = tmp_path / "registry.json"
        path.write_text(json.dumps({"admin": admin_aid, "max_schema_bytes": 1024}))

        config = RegistryConfig.from_file(path)

        assert config.admin == admin_aid
        assert config.max_schema_bytes == 1024
        assert config.identity_size == 32

# -*- encoding: utf-8 -*-
"""
Schema Registry - Content-addressed schema publication.

Usage:
    from attestso.schemas import SchemaRegistry, get_schema_registry

    registry = get_schema_registry()

    schema = registry.register_schema(
        deployer=issuer_aid,
        schema='{"name": "example", "type": "object"}',
        revocable=True,
    )

    # Resolve by uid or unique uid prefix
    schema = registry.resolve(schema.uid[:12])
"""

from .registry import (
    SchemaData,
    SchemaRegistry,
    get_schema_registry,
    reset_schema_registry,
)

__all__ = [
    "SchemaData",
    "SchemaRegistry",
    "get_schema_registry",
    "reset_schema_registry",
]

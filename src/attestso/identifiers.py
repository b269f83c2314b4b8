# -*- encoding: utf-8 -*-
"""
Identifier Derivation - Content-addressed primary keys for registry records.

A schema's uid is never chosen by the caller. It is a BLAKE3 digest, computed
in key-derivation mode under a fixed context string, over the canonical JSON
of the defining fields (deployer + schema content), and encoded as a CESR
qb64 Blake3-256 digest:

    uid = E + base64url(blake3_derive_key(CONTEXT, {"deployer": ..., "schema": ...}))

Identities (deployers, resolvers, levy assets and recipients, the
administrator) are CESR qb64 strings whose raw material is a fixed number of
bytes (32 by default: Ed25519 verification keys, Blake3-256 digests).

Usage:
    from attestso.identifiers import derive_identifier, validate_identity

    deployer = validate_identity(deployer, "deployer")
    uid = derive_identifier(deployer, '{"name": "example", "type": "object"}')
"""

import json
import logging
from typing import Any, Dict, Optional

import blake3
from keri.core.coring import Diger, Matter, MtrDex

from .errors import InvalidInput

logger = logging.getLogger(__name__)

# Domain separation for uid derivation. Changing this changes every uid.
SCHEMA_UID_CONTEXT = "attestso 2024-09 schema uid v1"

IDENTITY_SIZE = 32


def canonicalize(fields: Dict[str, Any]) -> bytes:
    """Canonical JSON serialization (sorted keys, compact separators)."""
    return json.dumps(fields, sort_keys=True, separators=(",", ":")).encode("utf-8")


def derive_identifier(
    deployer: str,
    schema: str,
    context: str = SCHEMA_UID_CONTEXT,
) -> str:
    """
    Derive the uid for a (deployer, schema) pair.

    Pure and deterministic: identical inputs yield identical output across
    processes. Inputs are expected to have been validated by the caller.

    Args:
        deployer: Deployer identity (qb64)
        schema: Schema content
        context: Key-derivation context (domain separator)

    Returns:
        qb64 Blake3-256 digest
    """
    ser = canonicalize({"deployer": deployer, "schema": schema})
    digest = blake3.blake3(ser, derive_key_context=context).digest()
    return Diger(raw=digest, code=MtrDex.Blake3_256).qb64


def validate_identity(value: Any, field: str, size: int = IDENTITY_SIZE) -> str:
    """
    Check that value is a qb64 identity with `size` bytes of raw material.

    Raises:
        InvalidInput: value is not a string, not parseable CESR, or the
            wrong size
    """
    if not isinstance(value, str) or not value:
        raise InvalidInput(field, f"expected a qb64 identity, got {value!r}")

    try:
        matter = Matter(qb64=value)
    except Exception as e:
        logger.debug(f"Rejected {field} {value!r}: {e}")
        raise InvalidInput(field, f"malformed identity {value!r}") from e

    if matter.qb64 != value:
        # Trailing material after a valid primitive
        raise InvalidInput(field, f"malformed identity {value!r}")

    if len(matter.raw) != size:
        raise InvalidInput(
            field,
            f"identity must carry {size} bytes, got {len(matter.raw)}",
        )
    return value


def validate_optional_identity(
    value: Optional[str],
    field: str,
    size: int = IDENTITY_SIZE,
) -> Optional[str]:
    """validate_identity, allowing None (absent reference)."""
    if value is None:
        return None
    return validate_identity(value, field, size=size)

# -*- encoding: utf-8 -*-
"""
Registry Configuration.

Size bounds default to the reference storage layout (200-byte schema
strings, 32-byte identities, unsigned 64-bit levy amounts) but are plain
configuration, not architectural constants.

Usage:
    config = RegistryConfig(admin="DKxy2sgzfplyr-tgwIxS19f2OchFHtLwPWD3v4oYimBx")
    config = RegistryConfig.from_file("registry.json")
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import InvalidInput
from .identifiers import IDENTITY_SIZE, validate_optional_identity

logger = logging.getLogger(__name__)

MAX_SCHEMA_BYTES = 200
MAX_LEVY_AMOUNT = 2**64 - 1


@dataclass(frozen=True)
class RegistryConfig:
    """Configuration shared by the authority and schema registries."""

    admin: Optional[str] = None  # None: no administrator, set_verified always refused
    max_schema_bytes: int = MAX_SCHEMA_BYTES
    identity_size: int = IDENTITY_SIZE
    max_levy_amount: int = MAX_LEVY_AMOUNT

    def __post_init__(self):
        for name in ("max_schema_bytes", "identity_size", "max_levy_amount"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidInput(name, f"must be a positive integer, got {value!r}")
        validate_optional_identity(self.admin, "admin", size=self.identity_size)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegistryConfig":
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise InvalidInput("config", f"unknown keys: {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RegistryConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        config = cls.from_dict(json.loads(path.read_text()))
        logger.debug(f"Loaded registry config from {path}")
        return config

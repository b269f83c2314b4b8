# -*- encoding: utf-8 -*-
"""
Authority Subpackage - Verification flags for identities.

Usage:
    from attestso.authority import AuthorityRegistry, AuthorityRecord
"""

from .registry import (
    AuthorityRecord,
    AuthorityRegistry,
)

__all__ = [
    "AuthorityRecord",
    "AuthorityRegistry",
]

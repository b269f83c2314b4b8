# -*- encoding: utf-8 -*-
"""
Governance Subpackage - Capability checks for privileged registry operations.
"""

from .gate import AdminGate

__all__ = [
    "AdminGate",
]

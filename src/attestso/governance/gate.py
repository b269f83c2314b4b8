# -*- encoding: utf-8 -*-
"""
AdminGate - Fail-closed administrator check for privileged operations.

The authority registry has exactly one privileged mutation, set_verified,
and exactly one identity allowed to perform it. The gate compares the caller
against that configured identity on every call. With no administrator
configured every privileged call is refused.

Usage:
    from attestso.governance import AdminGate
    from attestso.errors import Unauthorized

    gate = AdminGate(admin=ADMIN_AID)
    registry = AuthorityRegistry(gate=gate)

    registry.set_verified(record, caller=ADMIN_AID, is_verified=True)   # ok
    registry.set_verified(record, caller=OTHER_AID, is_verified=True)   # Unauthorized
"""

import hmac
import logging
from typing import Optional

from ..errors import Unauthorized

logger = logging.getLogger(__name__)


class AdminGate:
    """
    Enforcement gate for administrator-only operations.

    Read-only operations (get, is_verified, list) are not gated.
    """

    def __init__(self, admin: Optional[str] = None):
        self._admin = admin

    @property
    def admin(self) -> Optional[str]:
        return self._admin

    def is_admin(self, caller: Optional[str]) -> bool:
        if self._admin is None or not isinstance(caller, str):
            return False
        return hmac.compare_digest(caller.encode("utf-8"), self._admin.encode("utf-8"))

    def enforce(self, caller: Optional[str], operation: str) -> None:
        """
        Raise Unauthorized unless caller is the configured administrator.

        Args:
            caller: Identity invoking the operation
            operation: Operation name, for the error and audit log
        """
        if self.is_admin(caller):
            return

        if self._admin is None:
            logger.warning(f"Governance violation: {operation} refused, no administrator configured")
        else:
            logger.warning(f"Governance violation: {operation} by non-administrator {caller}")
        raise Unauthorized(str(caller), operation)

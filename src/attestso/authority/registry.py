# -*- encoding: utf-8 -*-
"""
Authority Registry - Administrator-controlled verification flags.

Each identity has at most one AuthorityRecord. Its is_verified flag gates
trust decisions elsewhere in the platform (for example, whether a deployer's
schemas are honored) and may only be written by the configured administrator.

Usage:
    registry = AuthorityRegistry(config=RegistryConfig(admin=ADMIN_AID))

    record = registry.find_or_create(issuer_aid)      # unverified
    registry.set_verified(record, caller=ADMIN_AID, is_verified=True)
    registry.is_verified(issuer_aid)                   # True
"""

import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from ..base_registry import BaseRecordRegistry
from ..config import RegistryConfig
from ..errors import AlreadyExists, InvalidInput, RecordNotFound
from ..events import EventSink, VerifiedAuthorityChanged
from ..governance.gate import AdminGate
from ..identifiers import validate_identity
from ..store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class AuthorityRecord:
    """Verification state of one identity."""
    authority: str
    is_verified: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthorityRecord":
        return cls(
            authority=data["authority"],
            is_verified=bool(data.get("is_verified", False)),
        )


class AuthorityRegistry(BaseRecordRegistry[AuthorityRecord]):
    """
    Registry of AuthorityRecords keyed by identity.

    The only mutation of an existing record is set_verified, which is
    administrator-only. Records are never deleted.
    """

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        sink: Optional[EventSink] = None,
        config: Optional[RegistryConfig] = None,
        gate: Optional[AdminGate] = None,
    ):
        super().__init__(store=store, sink=sink, config=config)
        self._gate = gate or AdminGate(admin=self._config.admin)

    @property
    def gate(self) -> AdminGate:
        return self._gate

    def find_or_create(self, authority: str) -> AuthorityRecord:
        """
        Return the record for authority, creating an unverified one if absent.

        Creation is not privileged and emits no signal.
        """
        validate_identity(authority, "authority", size=self._config.identity_size)

        record = self._store.get(authority)
        if record is not None:
            return record

        record = AuthorityRecord(authority=authority)
        try:
            self._store.create(authority, record)
        except AlreadyExists:
            # Lost a creation race; the winner's record is authoritative
            return self._store.get(authority)

        logger.info(f"Created authority record: {authority[:16]}...")
        return record

    def set_verified(
        self,
        record: AuthorityRecord,
        caller: str,
        is_verified: bool,
    ) -> AuthorityRecord:
        """
        Set a record's verified flag. Administrator only.

        Args:
            record: Existing record (looked up by the caller)
            caller: Identity invoking the operation
            is_verified: Desired flag value

        Returns:
            The updated record

        Raises:
            Unauthorized: caller is not the administrator
            InvalidInput: is_verified is not a bool, or record is malformed
            RecordNotFound: record is not stored in this registry
        """
        self._gate.enforce(caller, operation="set_verified")

        if not isinstance(is_verified, bool):
            raise InvalidInput("is_verified", f"expected a bool, got {is_verified!r}")
        if not isinstance(record, AuthorityRecord):
            raise InvalidInput("record", f"expected an AuthorityRecord, got {type(record).__name__}")
        validate_identity(record.authority, "authority", size=self._config.identity_size)
        if not self._store.contains(record.authority):
            raise RecordNotFound(record.authority)

        self._store.put(record.authority, replace(record, is_verified=is_verified))
        record.is_verified = is_verified

        logger.info(f"Authority {record.authority[:16]}... verified={is_verified}")
        self._emit(VerifiedAuthorityChanged(
            authority=record.authority,
            is_verified=record.is_verified,
        ))
        return record

    def update_authority(
        self,
        authority: str,
        caller: str,
        is_verified: bool,
    ) -> AuthorityRecord:
        """Look up the record for authority and set_verified on it.

        Raises:
            Unauthorized: caller is not the administrator
            RecordNotFound: no record exists for authority
        """
        self._gate.enforce(caller, operation="update_authority")

        record = self._store.get(authority)
        if record is None:
            raise RecordNotFound(authority)
        return self.set_verified(record, caller=caller, is_verified=is_verified)

    def is_verified(self, authority: str) -> bool:
        """Current flag for authority; unknown identities are unverified."""
        record = self._store.get(authority)
        return record is not None and record.is_verified

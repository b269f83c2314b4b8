# -*- encoding: utf-8 -*-
"""
Registry Errors - Typed failures for authority and schema operations.

Every failure is raised before any write, so a caller that catches one of
these can rely on registry state being unchanged.
"""


class AttestsoError(Exception):
    """Base class for all registry errors."""


class Unauthorized(AttestsoError):
    """Caller does not hold the administrator capability."""

    def __init__(self, caller: str, operation: str):
        self.caller = caller
        self.operation = operation
        super().__init__(f"{operation} requires the administrator, got caller {caller}")


class AlreadyExists(AttestsoError):
    """A record already exists at the derived identifier."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Record already exists: {key}")


class InvalidInput(AttestsoError, ValueError):
    """Empty or oversized schema content, malformed identity, bad levy."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class RecordNotFound(AttestsoError, KeyError):
    """No record stored under the requested key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Not found: {self.key}"

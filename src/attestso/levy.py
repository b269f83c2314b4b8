# -*- encoding: utf-8 -*-
"""
LevyPolicy - Optional usage fee attached to a schema.

A levy exists only embedded in a SchemaData. How the fee is collected is
outside this package; the registry records the terms.

No-fee encoding: `levy=None` is canonical. A levy with amount 0 is accepted
and stored as given, and SchemaData.levy_due() reports None for both.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import RegistryConfig
from .errors import InvalidInput
from .identifiers import validate_identity, validate_optional_identity


@dataclass(frozen=True)
class LevyPolicy:
    """Fee terms: amount, denominating asset (None = native unit), recipient."""

    amount: int
    recipient: str
    asset: Optional[str] = None

    @property
    def is_free(self) -> bool:
        return self.amount == 0

    def validate(self, config: RegistryConfig) -> "LevyPolicy":
        """Check amount bounds and identity shapes. Returns self."""
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidInput("levy.amount", f"expected an integer, got {self.amount!r}")
        if not 0 <= self.amount <= config.max_levy_amount:
            raise InvalidInput(
                "levy.amount",
                f"must be within 0..{config.max_levy_amount}, got {self.amount}",
            )
        validate_identity(self.recipient, "levy.recipient", size=config.identity_size)
        validate_optional_identity(self.asset, "levy.asset", size=config.identity_size)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "asset": self.asset,
            "recipient": self.recipient,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LevyPolicy":
        return cls(
            amount=data["amount"],
            recipient=data["recipient"],
            asset=data.get("asset"),
        )

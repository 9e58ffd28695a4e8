"""Wallet model."""

from __future__ import annotations

from pydantic import Field

from pycardata.models._base import CarDataBaseModel


class WalletState(CarDataBaseModel):
    """The user's simulated earning account.

    ``sharing_active`` mirrors "at least one listing is shared" and is
    re-derived whenever listing sharing changes.
    """

    address: str
    balance: float = 0.0
    earnings: float = Field(default=0.0, ge=0)
    sharing_active: bool = False

    def credit(self, amount: float) -> WalletState:
        """Return a copy with *amount* added to both balance and earnings."""
        if amount < 0:
            raise ValueError(f"credit amount must be non-negative, got {amount}")
        return self.model_copy(
            update={
                "balance": self.balance + amount,
                "earnings": self.earnings + amount,
            }
        )

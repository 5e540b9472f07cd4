"""Inventory data models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InventoryItem(BaseModel):
    """Stock on hand for a single named ingredient."""

    id: str
    name: str = Field(min_length=1)
    quantity: float = Field(ge=0)
    unit: str
    alert_level: float = Field(default=0.0, alias="alertLevel")
    expiry_date: Optional[date] = Field(default=None, alias="expiryDate")
    last_checked: datetime = Field(alias="lastChecked")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.alert_level

    def is_expiring_soon(self, today: date, within_days: int = 7) -> bool:
        """Return True when the item expires (or expired) less than ``within_days`` from today."""

        if self.expiry_date is None:
            return False
        return (self.expiry_date - today).days < within_days


__all__ = ["InventoryItem"]

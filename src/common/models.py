"""Shared Pydantic data models for the exchange engine.

``Listing`` is the typed contract every listing store returns. Rows are
validated once at the store boundary so the engine never has to guess
field shapes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Key of the structured wanted item inside a listing's attribute bag
WANTED_ITEM_KEY = "exchange_wanted"


# === Enums ===

class TradeMode(str, Enum):
    """How a listing is offered."""
    CASH = "cash"
    AUCTION = "auction"
    EXCHANGE = "exchange"


class ListingStatus(str, Enum):
    """Listing lifecycle state. The engine only reads active listings."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    SOLD = "sold"
    EXCHANGED = "exchanged"
    EXPIRED = "expired"
    DELETED = "deleted"


# === Listing ===

class Listing(BaseModel):
    """A marketplace listing as stored in the ``ads`` table.

    Column names from the store are accepted as aliases
    (``sale_type``, ``category_fields``, ``exchange_description``).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str = ""
    images: list[str] = Field(default_factory=list)
    trade_mode: TradeMode = Field(default=TradeMode.CASH, alias="sale_type")
    price: Optional[float] = None
    category_id: str
    subcategory_id: Optional[str] = None
    attributes: dict[str, Any] = Field(default_factory=dict, alias="category_fields")
    legacy_exchange_text: Optional[str] = Field(default=None, alias="exchange_description")
    governorate: Optional[str] = None
    city: Optional[str] = None
    status: ListingStatus = ListingStatus.ACTIVE

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("images", mode="before")
    @classmethod
    def _images_default(cls, value: Any) -> Any:
        return value or []

    @field_validator("attributes", mode="before")
    @classmethod
    def _attributes_default(cls, value: Any) -> Any:
        return value or {}

    @field_validator("price", mode="before")
    @classmethod
    def _price_nullable(cls, value: Any) -> Any:
        # 0 / "" mean "no price" in the marketplace
        if value in (None, "", 0, "0"):
            return None
        return value

    @field_validator("status", mode="before")
    @classmethod
    def _status_fallback(cls, value: Any) -> Any:
        # Any state we don't model still loads, just never as active
        if value is None:
            return ListingStatus.ACTIVE
        if isinstance(value, str) and not isinstance(value, ListingStatus):
            normalized = value.strip().lower()
            if normalized in {s.value for s in ListingStatus}:
                return normalized
            return ListingStatus.INACTIVE
        return value

    @field_validator("subcategory_id", "legacy_exchange_text", "governorate", "city", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def image(self) -> Optional[str]:
        """First image, used as the listing thumbnail."""
        return self.images[0] if self.images else None

    @property
    def is_exchange(self) -> bool:
        return self.trade_mode == TradeMode.EXCHANGE

    def to_row(self) -> dict[str, Any]:
        """Serialize using the store's column names."""
        return self.model_dump(mode="json", by_alias=True)

from typing import Optional

from pydantic import BaseModel, field_validator

from core.converters import as_count, as_price


def _upper_required(v: Optional[str]) -> str:
    v = (v or "").strip().upper()
    if not v:
        raise ValueError("field is required")
    return v


class InventoryItemRead(BaseModel):
    """Rentable hardware. Absent or invalid price/stock read back as 0."""

    id: Optional[str] = None
    name: str = ""
    rent_price: float = 0.0
    stock: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v) -> str:
        return str(v or "").strip()

    @field_validator("rent_price", mode="before")
    @classmethod
    def _rent_price(cls, v) -> float:
        return as_price(v)

    @field_validator("stock", mode="before")
    @classmethod
    def _stock(cls, v) -> int:
        return as_count(v)


class InventoryItemCreate(BaseModel):
    name: str
    rent_price: float = 0.0
    stock: int = 1

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _upper_required(v)

    @field_validator("rent_price", mode="before")
    @classmethod
    def _rent_price(cls, v) -> float:
        return as_price(v)

    @field_validator("stock", mode="before")
    @classmethod
    def _stock(cls, v) -> int:
        return as_count(v)


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = None
    rent_price: Optional[float] = None
    stock: Optional[int] = None

    @field_validator("name")
    @classmethod
    def _name_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _upper_required(v)

    @field_validator("rent_price", mode="before")
    @classmethod
    def _rent_price_optional(cls, v) -> Optional[float]:
        if v is None:
            return None
        return as_price(v)

    @field_validator("stock", mode="before")
    @classmethod
    def _stock_optional(cls, v) -> Optional[int]:
        if v is None:
            return None
        return as_count(v)

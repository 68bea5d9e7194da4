from typing import Optional

from pydantic import BaseModel, field_validator

from core.converters import as_int, as_price


class BookedLine(BaseModel):
    """One booked item on an event, or one template line of a bundle.

    Lines are keyed by ``name`` inside a ledger. ``price`` is the unit price
    captured when the line was booked, never a live inventory reference.
    """

    id: Optional[str] = None
    name: str
    quantity: int = 1
    price: float = 0.0

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v) -> str:
        return str(v or "").strip()

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, v) -> int:
        return as_int(v)

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, v) -> float:
        return as_price(v)


class BookedLineRead(BookedLine):
    stock: Optional[int] = None
    at_max: bool = False

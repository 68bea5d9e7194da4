from typing import List, Optional

from pydantic import BaseModel, computed_field, field_validator

from schemas.ledger import BookedLine


class BundleTemplate(BaseModel):
    id: Optional[str] = None
    name: str = ""
    items: List[BookedLine] = []

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v) -> str:
        return str(v or "").strip()

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, v):
        return list(v or [])

    @computed_field
    @property
    def item_count(self) -> int:
        return len(self.items)


class BundleSelection(BaseModel):
    inventory_item_id: str
    quantity: int = 1


class BundleCreate(BaseModel):
    name: str = ""
    items: List[BundleSelection] = []

from sqlalchemy import Column, Float, Integer, String
from .database import Base, new_id


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False, unique=True, index=True)  # uppercased
    rent_price = Column(Float, nullable=True, default=0.0)
    stock = Column(Integer, nullable=True, default=0)

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "rent_price": self.rent_price,
            "stock": self.stock,
        }

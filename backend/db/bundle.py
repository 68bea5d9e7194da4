from sqlalchemy import JSON, Column, String
from .database import Base, new_id


class Bundle(Base):
    __tablename__ = "bundles"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    # [{name, quantity, price}], fixed when the bundle is authored
    items = Column(JSON, nullable=False, default=list)

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "items": list(self.items or []),
        }

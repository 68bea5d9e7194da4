from sqlalchemy import JSON, Column, DateTime, Float, String, Text
from sqlalchemy.sql import func
from .database import Base, new_id


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String, nullable=False, default="")
    location = Column(Text, nullable=True)

    setup_start = Column(DateTime, nullable=True)
    event_start = Column(DateTime, nullable=True, index=True)
    event_end = Column(DateTime, nullable=True)
    teardown_end = Column(DateTime, nullable=True)

    # user ids, in selection order
    assigned_users = Column(JSON, nullable=False, default=list)
    # [{id, name, quantity, price}], price snapshotted at booking time
    booked_items = Column(JSON, nullable=False, default=list)
    total_price = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "title": self.title,
            "location": self.location,
            "setup_start": self.setup_start,
            "event_start": self.event_start,
            "event_end": self.event_end,
            "teardown_end": self.teardown_end,
            "assigned_users": list(self.assigned_users or []),
            "booked_items": list(self.booked_items or []),
            "total_price": self.total_price,
        }

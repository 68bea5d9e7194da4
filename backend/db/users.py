from sqlalchemy import Column, String
from .database import Base, new_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String, nullable=False, index=True)
    password = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default="Technician")

    @property
    def to_schema(self):
        """Convert User model to schema dictionary format"""
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "role": self.role,
        }

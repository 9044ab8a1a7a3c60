# api/user/user_model.py
import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from config.database import Base


class User(Base):
    __tablename__ = 'users'

    id          = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email       = Column(String(255), nullable=False, unique=True, index=True)
    full_name   = Column(String(255), nullable=False)
    created_at  = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at  = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"

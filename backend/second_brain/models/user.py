from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from second_brain.core.database import Base, new_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    username = Column(String(10), unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash, never plaintext

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    contents = relationship("Content", back_populates="user")
    share_link = relationship("ShareLink", back_populates="user", uselist=False)

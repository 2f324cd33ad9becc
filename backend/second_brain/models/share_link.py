from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from second_brain.core.database import Base, new_id


class ShareLink(Base):
    __tablename__ = "share_links"

    id = Column(String(32), primary_key=True, default=new_id)
    hash = Column(String, unique=True, nullable=False, index=True)
    # At most one active link per user
    user_id = Column(String(32), ForeignKey("users.id"), unique=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="share_link")

from sqlalchemy import Column, String, DateTime
from datetime import datetime
from second_brain.core.database import Base, new_id


class Tag(Base):
    __tablename__ = "tags"

    id = Column(String(32), primary_key=True, default=new_id)
    # Globally unique; the conflict target of the find-or-create upsert
    title = Column(String, unique=True, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)

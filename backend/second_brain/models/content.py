from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    ForeignKey,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum
from second_brain.core.database import Base, new_id


class ContentType(str, Enum):
    TWITTER = "twitter"
    YOUTUBE = "youtube"


class ContentTag(Base):
    """Ordered link between a content row and one of its tags."""

    __tablename__ = "content_tags"

    content_id = Column(
        String(32),
        ForeignKey("contents.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position = Column(Integer, primary_key=True)
    tag_id = Column(String(32), ForeignKey("tags.id"), nullable=False, index=True)

    tag = relationship("Tag", lazy="joined")


class Content(Base):
    __tablename__ = "contents"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    link = Column(String, nullable=False)
    type = Column(String(16), nullable=False)
    title = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    user = relationship("User", back_populates="contents")
    tag_links = relationship(
        "ContentTag",
        order_by="ContentTag.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("type IN ('twitter', 'youtube')", name="ck_contents_type"),
    )

    @property
    def tag_ids(self):
        return [link.tag_id for link in self.tag_links]

    @property
    def tags(self):
        return [link.tag for link in self.tag_links]

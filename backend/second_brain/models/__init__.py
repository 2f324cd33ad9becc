from .user import User
from .tag import Tag
from .content import Content, ContentTag, ContentType
from .share_link import ShareLink

__all__ = [
    "User",
    "Tag",
    "Content",
    "ContentTag",
    "ContentType",
    "ShareLink",
]

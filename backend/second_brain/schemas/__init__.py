from second_brain.schemas.user import (
    SignupRequest,
    SigninRequest,
    TokenResponse,
    MessageResponse,
)
from second_brain.schemas.tag import Tag
from second_brain.schemas.content import (
    Content,
    ContentCreate,
    ContentDelete,
    ContentWithTags,
    ContentCreatedResponse,
    ContentListResponse,
)
from second_brain.schemas.share import ShareRequest, ShareHashResponse, SharedBrain

__all__ = [
    "SignupRequest",
    "SigninRequest",
    "TokenResponse",
    "MessageResponse",
    "Tag",
    "Content",
    "ContentCreate",
    "ContentDelete",
    "ContentWithTags",
    "ContentCreatedResponse",
    "ContentListResponse",
    "ShareRequest",
    "ShareHashResponse",
    "SharedBrain",
]

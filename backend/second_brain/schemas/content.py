from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional
from second_brain.models.content import ContentType
from .tag import Tag


class ContentCreate(BaseModel):
    link: str = Field(min_length=1)
    type: ContentType
    title: str = Field(min_length=1)
    # Tag IDs or tag titles, freely mixed
    tags: List[str] = []


class ContentDelete(BaseModel):
    content_id: Optional[str] = Field(None, alias="contentId")


class ContentBase(BaseModel):
    id: str
    link: str
    type: ContentType
    title: str
    user_id: str = Field(
        validation_alias=AliasChoices("user_id", "userId"),
        serialization_alias="userId",
    )

    class Config:
        from_attributes = True


class Content(ContentBase):
    """Content as stored: tags are referenced by ID."""

    tags: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("tag_ids", "tags")
    )


class ContentWithTags(ContentBase):
    """Content with each tag expanded to its title."""

    tags: List[Tag] = []


class ContentCreatedResponse(BaseModel):
    message: str
    content: Content


class ContentListResponse(BaseModel):
    content: List[ContentWithTags]

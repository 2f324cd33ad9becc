from pydantic import BaseModel
from typing import List
from .content import ContentWithTags


class ShareRequest(BaseModel):
    share: bool


class ShareHashResponse(BaseModel):
    hash: str


class SharedBrain(BaseModel):
    username: str
    content: List[ContentWithTags]

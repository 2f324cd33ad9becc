from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from second_brain.core.auth import get_current_user_id
from second_brain.core.database import get_db
from second_brain.core.errors import OwnershipError, ValidationError
from second_brain.core.logging_config import log_security_event, get_client_ip
from second_brain.schemas.content import (
    Content as ContentSchema,
    ContentCreate,
    ContentDelete,
    ContentWithTags,
    ContentCreatedResponse,
    ContentListResponse,
)
from second_brain.schemas.user import MessageResponse
from second_brain.services import content as content_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "", response_model=ContentCreatedResponse, status_code=status.HTTP_201_CREATED
)
def add_content(
    payload: ContentCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Save a link for the current user.

    - Tags may be existing tag IDs or titles; unknown titles become new tags
    - Returns the stored record with tag IDs
    """
    content = content_service.create_content(
        db,
        user_id=user_id,
        link=payload.link,
        type=payload.type,
        title=payload.title,
        tags=payload.tags,
    )
    return ContentCreatedResponse(
        message="Content added successfully",
        content=ContentSchema.model_validate(content),
    )


@router.get("", response_model=ContentListResponse)
def get_content(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """All content of the current user, tags expanded to titles."""
    contents = content_service.list_content(db, user_id)
    return ContentListResponse(
        content=[ContentWithTags.model_validate(c) for c in contents]
    )


@router.delete("", response_model=MessageResponse)
def delete_content(
    request: Request,
    payload: Optional[ContentDelete] = Body(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Delete one of the current user's content rows."""
    if payload is None or not payload.content_id:
        raise ValidationError(
            "Content ID is required",
            errors=[
                {"loc": ["contentId"], "msg": "Content ID is required", "type": "missing"}
            ],
            status_code=400,
        )

    try:
        content_service.delete_content(db, user_id, payload.content_id)
    except OwnershipError:
        log_security_event(
            event_type="content.delete.denied",
            message="Delete rejected: content not owned or missing",
            level=logging.WARNING,
            user_id=user_id,
            ip_address=get_client_ip(request),
            request_method=request.method,
            request_path=request.url.path,
            event_category="authorization",
        )
        raise

    return {"message": "Content deleted successfully"}

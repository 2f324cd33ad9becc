from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from typing import Union
import logging

from second_brain.api.deps import get_app_settings
from second_brain.core.auth import get_current_user_id
from second_brain.core.config import Settings
from second_brain.core.database import get_db
from second_brain.core.logging_config import log_security_event, get_client_ip
from second_brain.schemas.content import ContentWithTags
from second_brain.schemas.share import ShareRequest, ShareHashResponse, SharedBrain
from second_brain.schemas.user import MessageResponse
from second_brain.services import share_links

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/share", response_model=Union[ShareHashResponse, MessageResponse])
def share_brain(
    request: Request,
    payload: ShareRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    settings: Settings = Depends(get_app_settings),
):
    """
    Turn the public share link on or off.

    Enabling twice returns the same hash; disabling removes the link so the
    old hash stops resolving.
    """
    if payload.share:
        share_hash = share_links.enable_sharing(
            db, user_id, hash_length=settings.SHARE_HASH_LENGTH
        )
        log_security_event(
            event_type="share.enabled",
            message="Public share link enabled",
            user_id=user_id,
            ip_address=get_client_ip(request),
            event_category="sharing",
        )
        return {"hash": share_hash}

    share_links.disable_sharing(db, user_id)
    log_security_event(
        event_type="share.disabled",
        message="Public share link disabled",
        user_id=user_id,
        ip_address=get_client_ip(request),
        event_category="sharing",
    )
    return {"message": "removed link"}


@router.get("/{share_link}", response_model=SharedBrain)
def get_shared_brain(share_link: str, db: Session = Depends(get_db)):
    """Public, unauthenticated view of a user's content."""
    user, contents = share_links.resolve_share(db, share_link)
    return SharedBrain(
        username=user.username,
        content=[ContentWithTags.model_validate(c) for c in contents],
    )

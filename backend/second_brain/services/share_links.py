"""
Public share links: at most one per user, reused until sharing is disabled.
"""

from sqlalchemy.orm import Session
from sqlalchemy import exc as sa_exc
from typing import List, Tuple
import logging

from second_brain.core.errors import IntegrityError, NotFoundError
from second_brain.core.security import generate_share_hash
from second_brain.models.content import Content
from second_brain.models.share_link import ShareLink
from second_brain.models.user import User
from second_brain.services.content import list_content

logger = logging.getLogger(__name__)


def enable_sharing(db: Session, user_id: str, hash_length: int = 10) -> str:
    """Return the user's share hash, minting one if none exists."""
    existing = db.query(ShareLink).filter(ShareLink.user_id == user_id).first()
    if existing:
        return existing.hash

    link = ShareLink(user_id=user_id, hash=generate_share_hash(hash_length))
    db.add(link)
    try:
        db.commit()
    except sa_exc.IntegrityError:
        # A concurrent request created the user's link first
        db.rollback()
        existing = db.query(ShareLink).filter(ShareLink.user_id == user_id).first()
        if existing is None:
            raise
        return existing.hash

    logger.info(f"User {user_id} enabled sharing")
    return link.hash


def disable_sharing(db: Session, user_id: str) -> bool:
    """Remove the user's share link. Returns whether one existed."""
    deleted = db.query(ShareLink).filter(ShareLink.user_id == user_id).delete()
    db.commit()
    if deleted:
        logger.info(f"User {user_id} disabled sharing")
    return bool(deleted)


def resolve_share(db: Session, share_hash: str) -> Tuple[User, List[Content]]:
    """
    Look up the owner and content behind a public share hash.

    Raises:
        NotFoundError: If no link has this hash
        IntegrityError: If the link's owner no longer exists
    """
    link = db.query(ShareLink).filter(ShareLink.hash == share_hash).first()
    if link is None:
        raise NotFoundError("Sorry Incorrect Url")

    user = db.query(User).filter(User.id == link.user_id).first()
    if user is None:
        logger.error(f"Share link {link.id} points to missing user {link.user_id}")
        raise IntegrityError("User not found for this link")

    return user, list_content(db, user.id)

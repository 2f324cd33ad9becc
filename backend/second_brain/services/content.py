from sqlalchemy.orm import Session, selectinload
from sqlalchemy import exc as sa_exc
from typing import List, Sequence
import logging

from second_brain.core.errors import OwnershipError, ValidationError
from second_brain.models.content import Content, ContentTag, ContentType
from second_brain.models.tag import Tag
from second_brain.services.tag_normalizer import is_tag_id, normalize_tags

logger = logging.getLogger(__name__)


def _unknown_tag_ids(db: Session, refs: Sequence[str]) -> List[str]:
    """ID-shaped references that name no existing tag."""
    requested = {ref for ref in refs if is_tag_id(ref)}
    if not requested:
        return []
    found = {row.id for row in db.query(Tag.id).filter(Tag.id.in_(requested))}
    return sorted(requested - found)


def create_content(
    db: Session,
    user_id: str,
    link: str,
    type: ContentType,
    title: str,
    tags: Sequence[str],
) -> Content:
    """
    Store a new content row owned by ``user_id``.

    Tag resolution and the content insert share one transaction, so a failure
    anywhere leaves nothing behind.
    """
    tag_ids = normalize_tags(db, tags)

    content = Content(
        user_id=user_id,
        link=link,
        type=ContentType(type).value,
        title=title,
        tag_links=[
            ContentTag(position=position, tag_id=tag_id)
            for position, tag_id in enumerate(tag_ids)
        ],
    )
    db.add(content)

    try:
        db.commit()
    except sa_exc.IntegrityError:
        db.rollback()
        unknown = _unknown_tag_ids(db, tags)
        if not unknown:
            # Not the caller's tags; surfaces as a store failure
            raise
        logger.info(f"User {user_id} referenced unknown tag IDs {unknown}")
        raise ValidationError(
            errors=[{"loc": ["tags"], "msg": "Unknown tag ID", "type": "unknown_tag"}]
        )

    db.refresh(content)
    logger.info(f"User {user_id} added content {content.id} with {len(tag_ids)} tags")
    return content


def list_content(db: Session, user_id: str) -> List[Content]:
    """All content owned by ``user_id`` with tags loaded, oldest first."""
    return (
        db.query(Content)
        .options(selectinload(Content.tag_links).joinedload(ContentTag.tag))
        .filter(Content.user_id == user_id)
        .order_by(Content.created_at, Content.id)
        .all()
    )


def delete_content(db: Session, user_id: str, content_id: str) -> None:
    """
    Delete the content only if ``user_id`` owns it.

    One owner-filtered DELETE; its tag links go with it through the foreign
    key cascade. A foreign ID and a missing ID raise the same OwnershipError.
    """
    deleted = (
        db.query(Content)
        .filter(Content.id == content_id, Content.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise OwnershipError()

    db.commit()
    logger.info(f"User {user_id} deleted content {content_id}")

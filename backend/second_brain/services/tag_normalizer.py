"""
Map free-form tag references to stable tag IDs.

A reference shaped like a tag ID is passed through untouched. Anything else is
a title, resolved with one conditional insert on the unique ``tags.title``
index followed by a lookup, so two requests introducing the same new title end
up sharing a single row.

Titles are upserted in sorted order. Each uncommitted insert holds its index
entry until the transaction ends, so a common order keeps two requests with
overlapping titles from waiting on each other.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session
from typing import Dict, List, Sequence
import logging
import re

from second_brain.core.database import UPSERT_INSERTS, new_id
from second_brain.models.tag import Tag

logger = logging.getLogger(__name__)

TAG_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{32}$")


def is_tag_id(ref: str) -> bool:
    return bool(TAG_ID_PATTERN.match(ref))


def get_or_create_tag_id(db: Session, title: str) -> str:
    """Return the ID of the tag titled ``title``, creating it if needed."""
    insert = UPSERT_INSERTS[db.get_bind().dialect.name]

    stmt = (
        insert(Tag.__table__)
        .values(id=new_id(), title=title)
        .on_conflict_do_nothing(index_elements=["title"])
    )
    result = db.execute(stmt)
    if result.rowcount:
        logger.info(f"Created tag {title!r}")

    return db.execute(select(Tag.id).where(Tag.title == title)).scalar_one()


def normalize_tags(db: Session, refs: Sequence[str]) -> List[str]:
    """
    Resolve each reference to a tag ID, preserving order and duplicates.

    ID-shaped references are not checked for existence here; the
    ``content_tags.tag_id`` foreign key rejects unknown ones at commit.
    """
    titles = sorted({ref for ref in refs if not is_tag_id(ref)})
    resolved: Dict[str, str] = {
        title: get_or_create_tag_id(db, title) for title in titles
    }
    return [ref if is_tag_id(ref) else resolved[ref] for ref in refs]

"""Position allocator: append positions for sibling groups and favorites lists."""

from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Optional
from pagetree.models.page import Page
from pagetree.models.favorite import Favorite
from pagetree.core.app_logger import get_logger

logger = get_logger(__name__)


def sibling_filter(org_id: int, parent_id: Optional[int]):
    """Filtres SQL d'un groupe de frères vivants (org, parent)"""
    parent_clause = Page.parent_id.is_(None) if parent_id is None else Page.parent_id == parent_id
    return (
        Page.organization_id == org_id,
        parent_clause,
        Page.trashed_at.is_(None),
    )


def next_page_position(db: Session, org_id: int, parent_id: Optional[int]) -> int:
    max_position = db.query(func.max(Page.position)).filter(*sibling_filter(org_id, parent_id)).scalar()
    return 0 if max_position is None else max_position + 1


def next_favorite_position(db: Session, user_id: int) -> int:
    max_position = db.query(func.max(Favorite.position)).filter(Favorite.user_id == user_id).scalar()
    return 0 if max_position is None else max_position + 1


def normalize_positions(db: Session, org_id: int, parent_id: Optional[int]) -> int:
    """
    Renumber the live siblings of ``(org_id, parent_id)`` to 0..n-1.

    Moves never compact the group they leave, so gaps accumulate over time;
    this rewrites the group densely, keeping the current order (ties broken by
    id). Returns the number of pages whose position changed.
    """
    siblings = db.query(Page).filter(*sibling_filter(org_id, parent_id)).order_by(Page.position, Page.id).all()

    changed = 0
    try:
        for index, page in enumerate(siblings):
            if page.position != index:
                page.position = index
                changed += 1
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Normalized positions org=%s parent=%s (%d/%d changed)", org_id, parent_id, changed, len(siblings))
    return changed

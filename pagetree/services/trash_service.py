"""
Trash / restore engine.

Trashing cascades one timestamp to a snapshot of the live subtree taken at
call time; restoring only brings back the page asked for, its descendants
stay in trash until restored one by one.
"""

from sqlalchemy.orm import Session
from datetime import datetime
from typing import List
from pagetree.models.page import Page
from pagetree.core.exceptions import PageAlreadyInTrash, PageNotInTrash
from pagetree.services.page_service import find_page, get_page
from pagetree.services.position_service import next_page_position
from pagetree.core.app_logger import get_logger

logger = get_logger(__name__)


def collect_descendant_ids(db: Session, org_id: int, page_id: int) -> List[int]:
    """Ids of every live descendant of ``page_id`` (depth first, worklist based)."""
    descendants: List[int] = []
    seen = {page_id}
    stack = [page_id]

    while stack:
        current_id = stack.pop()
        if current_id != page_id:
            descendants.append(current_id)

        children = db.query(Page.id).filter(
            Page.organization_id == org_id,
            Page.parent_id == current_id,
            Page.trashed_at.is_(None)
        ).order_by(Page.position.desc(), Page.id.desc()).all()

        # empilés à l'envers pour dépiler dans l'ordre des positions
        for (child_id,) in children:
            if child_id not in seen:
                seen.add(child_id)
                stack.append(child_id)

    return descendants


def trash_page(db: Session, org_id: int, page_id: int) -> List[int]:
    """Move a page and its live subtree to trash. Returns the trashed ids."""
    page = get_page(db, org_id, page_id)
    if page.is_trashed:
        raise PageAlreadyInTrash(page_id=page_id)

    ids = [page.id] + collect_descendant_ids(db, org_id, page.id)
    now = datetime.utcnow()

    try:
        db.query(Page).filter(
            Page.id.in_(ids),
            Page.organization_id == org_id
        ).update({Page.trashed_at: now}, synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Trashed page %s in org=%s with %d descendant(s)", page_id, org_id, len(ids) - 1)
    return ids


def restore_page(db: Session, org_id: int, page_id: int) -> Page:
    page = get_page(db, org_id, page_id)
    if not page.is_trashed:
        raise PageNotInTrash(page_id=page_id)

    parent_id = page.parent_id
    if parent_id is not None and not find_page(db, org_id, parent_id, live_only=True):
        # parent supprimé ou encore à la corbeille -> retour à la racine
        logger.info("Parent %s of page %s unavailable, restoring to root", parent_id, page_id)
        parent_id = None

    try:
        page.parent_id = parent_id
        page.position = next_page_position(db, org_id, parent_id)
        page.trashed_at = None
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(page)

    logger.info("Restored page %s in org=%s (parent=%s, position=%s)", page.id, org_id, page.parent_id, page.position)
    return page


def permanently_delete_page(db: Session, org_id: int, page_id: int) -> None:
    """Hard-delete one trashed page. Its favorites are removed with it."""
    page = get_page(db, org_id, page_id)
    if not page.is_trashed:
        raise PageNotInTrash(page_id=page_id)

    try:
        # les enfants restants perdent leur parent, ils gardent leur état
        db.query(Page).filter(
            Page.organization_id == org_id,
            Page.parent_id == page.id
        ).update({Page.parent_id: None}, synchronize_session=False)
        db.delete(page)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Permanently deleted page %s in org=%s", page_id, org_id)


def get_trashed_pages(db: Session, org_id: int) -> List[Page]:
    return db.query(Page).filter(
        Page.organization_id == org_id,
        Page.trashed_at.isnot(None)
    ).order_by(Page.trashed_at.desc(), Page.id).all()

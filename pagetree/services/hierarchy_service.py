"""
Hierarchy operations: ancestor walk (breadcrumbs), move validation and move.
"""

from sqlalchemy.orm import Session
from typing import List, Optional
from pagetree.models.page import Page
from pagetree.schemas.page import PageMove
from pagetree.core.exceptions import InvalidParent
from pagetree.services.page_service import find_page, get_page, get_live_page
from pagetree.services.position_service import next_page_position, sibling_filter
from pagetree.core.app_logger import get_logger

logger = get_logger(__name__)


# ============ ANCESTORS ============

def get_ancestors(db: Session, org_id: int, page_id: int) -> List[Page]:
    """
    Return the ancestors of a page, root first.

    The walk follows parent links whatever their trash state and stops
    silently on a missing parent, so a partly orphaned chain still yields
    what exists. A repeated id also stops the walk.
    """
    page = get_page(db, org_id, page_id)

    ancestors: List[Page] = []
    visited = {page.id}
    parent_id = page.parent_id

    while parent_id is not None:
        if parent_id in visited:
            logger.warning("Cycle detected above page %s in org=%s at page %s", page_id, org_id, parent_id)
            break
        parent = find_page(db, org_id, parent_id)
        if not parent:
            break
        visited.add(parent.id)
        ancestors.append(parent)
        parent_id = parent.parent_id

    # on a remonté de parent en racine
    ancestors.reverse()
    return ancestors


# ============ MOVE ============

def validate_move(db: Session, org_id: int, page_id: int, new_parent_id: Optional[int]) -> None:
    """Raise InvalidParent if ``page_id`` cannot be placed under ``new_parent_id``."""
    if new_parent_id is None:
        return

    if new_parent_id == page_id:
        raise InvalidParent("A page cannot be its own parent", page_id=page_id)

    new_parent = find_page(db, org_id, new_parent_id, live_only=True)
    if not new_parent:
        raise InvalidParent("Target parent does not exist or is in trash", parent_id=new_parent_id)

    # le nouveau parent ne doit pas être un descendant de la page déplacée
    if any(ancestor.id == page_id for ancestor in get_ancestors(db, org_id, new_parent_id)):
        raise InvalidParent("Cannot move a page under one of its descendants", page_id=page_id, parent_id=new_parent_id)


def move_page(db: Session, org_id: int, page_id: int, data: PageMove) -> Page:
    """
    Re-parent and/or reposition a page.

    With an explicit position, live siblings of the destination group at or
    after that position are shifted by one in the same transaction. The group
    the page leaves is not compacted; see normalize_positions.
    """
    page = get_live_page(db, org_id, page_id)

    new_parent_id = data.parent_id if data.parent_given else page.parent_id
    parent_changed = new_parent_id != page.parent_id
    if parent_changed:
        validate_move(db, org_id, page.id, new_parent_id)

    if data.position is not None:
        position = data.position
    elif parent_changed:
        position = next_page_position(db, org_id, new_parent_id)
    else:
        position = page.position

    try:
        if data.position is not None:
            db.query(Page).filter(
                *sibling_filter(org_id, new_parent_id),
                Page.position >= position,
                Page.id != page.id
            ).update({Page.position: Page.position + 1}, synchronize_session=False)

        page.parent_id = new_parent_id
        page.position = position
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(page)

    logger.info("Moved page %s in org=%s to parent=%s position=%s", page.id, org_id, new_parent_id, position)
    return page

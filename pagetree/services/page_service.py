"""Page lifecycle: create, read, update, duplicate."""

from sqlalchemy.orm import Session
from typing import Optional
from pagetree.models.page import Page
from pagetree.schemas.page import PageCreate, PageUpdate
from pagetree.core.config import settings
from pagetree.core.exceptions import PageNotFound, PageInTrash, InvalidParent, SlugAlreadyExists
from pagetree.services.position_service import next_page_position
from pagetree.core.app_logger import get_logger

logger = get_logger(__name__)


def find_page(db: Session, org_id: int, page_id: Optional[int], live_only: bool = False) -> Optional[Page]:
    """Cherche une page dans l'org, None si absente"""
    if page_id is None:
        return None
    query = db.query(Page).filter(Page.id == page_id, Page.organization_id == org_id)
    if live_only:
        query = query.filter(Page.trashed_at.is_(None))
    return query.first()


def get_page(db: Session, org_id: int, page_id: int) -> Page:
    page = find_page(db, org_id, page_id)
    if not page:
        raise PageNotFound(page_id=page_id)
    return page


def get_live_page(db: Session, org_id: int, page_id: int) -> Page:
    """Same as get_page but refuses trashed pages (write guard)."""
    page = get_page(db, org_id, page_id)
    if page.is_trashed:
        raise PageInTrash(page_id=page_id)
    return page


def create_page(db: Session, org_id: int, actor_id: int, data: PageCreate) -> Page:
    if data.parent_id is not None and not find_page(db, org_id, data.parent_id, live_only=True):
        raise InvalidParent(parent_id=data.parent_id)

    page = Page(
        organization_id=org_id,
        parent_id=data.parent_id,
        position=next_page_position(db, org_id, data.parent_id),
        title=data.title if data.title is not None else settings.DEFAULT_PAGE_TITLE,
        icon=data.icon,
        created_by_id=actor_id,
    )
    try:
        db.add(page)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(page)

    logger.info("Created page %s in org=%s (parent=%s, position=%s)", page.id, org_id, page.parent_id, page.position)
    return page


def update_page(db: Session, org_id: int, page_id: int, actor_id: int, data: PageUpdate) -> Page:
    page = get_live_page(db, org_id, page_id)
    changes = data.changes()

    slug = changes.get("public_slug")
    if slug is not None:
        # unicité globale, toutes orgs confondues
        taken = db.query(Page.id).filter(Page.public_slug == slug, Page.id != page.id).first()
        if taken:
            raise SlugAlreadyExists(public_slug=slug)

    for field, value in changes.items():
        setattr(page, field, value)
    page.updated_by_id = actor_id

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(page)

    logger.info("Updated page %s in org=%s (%s)", page.id, org_id, ", ".join(sorted(changes)) or "no fields")
    return page


def duplicate_page(db: Session, org_id: int, page_id: int, actor_id: int) -> Page:
    """Copy a page next to itself. Children and content are not copied."""
    source = get_live_page(db, org_id, page_id)

    copy = Page(
        organization_id=org_id,
        parent_id=source.parent_id,
        position=next_page_position(db, org_id, source.parent_id),
        title=f"{source.title}{settings.DUPLICATE_SUFFIX}",
        icon=source.icon,
        cover_url=source.cover_url,
        created_by_id=actor_id,
    )
    try:
        db.add(copy)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(copy)

    logger.info("Duplicated page %s as %s in org=%s", source.id, copy.id, org_id)
    return copy

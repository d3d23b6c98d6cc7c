"""Favorites service: per-user ordered list of pages"""

from sqlalchemy.orm import Session, contains_eager
from typing import List
from pagetree.models.page import Page
from pagetree.models.favorite import Favorite
from pagetree.schemas.favorite import FavoriteReorder
from pagetree.core.exceptions import PageNotFound, FavoriteExists, FavoriteNotFound
from pagetree.services.page_service import find_page
from pagetree.services.position_service import next_favorite_position
from pagetree.core.app_logger import get_logger

logger = get_logger(__name__)


def add_favorite(db: Session, user_id: int, page_id: int, org_id: int) -> Favorite:
    if not find_page(db, org_id, page_id, live_only=True):
        raise PageNotFound(page_id=page_id)

    existing = db.query(Favorite).filter(Favorite.user_id == user_id, Favorite.page_id == page_id).first()
    if existing:
        raise FavoriteExists(page_id=page_id)

    favorite = Favorite(
        user_id=user_id,
        page_id=page_id,
        position=next_favorite_position(db, user_id),
    )
    try:
        db.add(favorite)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(favorite)

    logger.info("User %s added page %s to favorites (position=%s)", user_id, page_id, favorite.position)
    return favorite


def remove_favorite(db: Session, user_id: int, page_id: int) -> None:
    favorite = db.query(Favorite).filter(Favorite.user_id == user_id, Favorite.page_id == page_id).first()
    if not favorite:
        raise FavoriteNotFound(page_id=page_id)

    try:
        db.delete(favorite)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("User %s removed page %s from favorites", user_id, page_id)


def list_favorites(db: Session, org_id: int, user_id: int) -> List[Favorite]:
    # seulement les pages vivantes de l'org
    return db.query(Favorite).join(Page, Favorite.page_id == Page.id).options(
        contains_eager(Favorite.page)
    ).filter(
        Favorite.user_id == user_id,
        Page.organization_id == org_id,
        Page.trashed_at.is_(None)
    ).order_by(Favorite.position, Favorite.id).all()


def reorder_favorites(db: Session, user_id: int, data: FavoriteReorder) -> None:
    """Set position = index for each favorite id. All or nothing."""
    ordered_ids = data.ordered_ids
    favorites = {f.id: f for f in db.query(Favorite).filter(Favorite.user_id == user_id).all()}

    unknown = [fav_id for fav_id in ordered_ids if fav_id not in favorites]
    if unknown:
        raise FavoriteNotFound(favorite_ids=unknown)

    try:
        for index, fav_id in enumerate(ordered_ids):
            favorites[fav_id].position = index
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("User %s reordered %d favorite(s)", user_id, len(ordered_ids))

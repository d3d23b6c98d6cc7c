"""Page model"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from pagetree.core.database import Base


class Page(Base):
    __tablename__ = "pages"
    __table_args__ = (
        # groupe de frères : (org, parent) trié par position
        Index("ix_pages_org_parent_position", "organization_id", "parent_id", "position"),
    )

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("pages.id", ondelete="SET NULL"), nullable=True, index=True)
    position = Column(Integer, nullable=False, default=0)

    title = Column(String(255), nullable=False, default="Untitled")
    icon = Column(String(50), nullable=True)
    cover_url = Column(String, nullable=True)

    is_public = Column(Boolean, nullable=False, default=False)
    public_slug = Column(String(100), nullable=True, unique=True)

    trashed_at = Column(DateTime, nullable=True, index=True)  # NULL = page vivante

    created_by_id = Column(Integer, nullable=False)
    updated_by_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    favorites = relationship("Favorite", back_populates="page", cascade="all, delete")

    @property
    def is_trashed(self) -> bool:
        return self.trashed_at is not None

    def __repr__(self) -> str:
        return f"<Page id={self.id} org={self.organization_id} parent={self.parent_id} pos={self.position}>"


from pagetree.models.favorite import Favorite  # noqa: E402,F401  (enregistre la relation)

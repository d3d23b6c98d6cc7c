import os
import sys
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# DB SQLite pour les tests AVANT d'importer pagetree
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ["DATABASE_URL"] = SQLALCHEMY_TEST_DATABASE_URL

import pytest
from datetime import datetime
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

test_engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

@event.listens_for(test_engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite n'applique les FK (CASCADE / SET NULL) qu'avec ce pragma
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# PATCH: remplacer le engine et SessionLocal du core.database
import pagetree.core.database
pagetree.core.database.engine = test_engine
pagetree.core.database.SessionLocal = TestingSessionLocal

from pagetree.core.database import Base, init_db
from pagetree.models.page import Page
from pagetree.models.favorite import Favorite

ORG_ID = 1
OTHER_ORG_ID = 2
USER_ID = 10
OTHER_USER_ID = 11


@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=test_engine)
    init_db(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture
def make_page(db):
    """Insère une page directement en base (sans passer par les services)"""
    def _make_page(title="Page", parent=None, position=0, org_id=ORG_ID, trashed=False, **fields):
        fields.setdefault("trashed_at", datetime.utcnow() if trashed else None)
        page = Page(
            organization_id=org_id,
            parent_id=parent.id if parent is not None else None,
            position=position,
            title=title,
            created_by_id=USER_ID,
            **fields
        )
        db.add(page)
        db.commit()
        db.refresh(page)
        return page
    return _make_page


@pytest.fixture
def make_favorite(db):
    def _make_favorite(page, user_id=USER_ID, position=0):
        favorite = Favorite(user_id=user_id, page_id=page.id, position=position)
        db.add(favorite)
        db.commit()
        db.refresh(favorite)
        return favorite
    return _make_favorite

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from pagetree.core.config import settings

engine = create_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def init_db(bind=None):
    """Crée les tables pages/favorites si elles n'existent pas"""
    # les modèles doivent être importés pour être enregistrés sur Base
    from pagetree.models import page, favorite  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)

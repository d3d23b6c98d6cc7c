from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://pagetree:pagetree@db:5432/pagetree")
    DB_ECHO = getenv("DB_ECHO", "false").lower() == "true"
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO").upper()

    DEFAULT_PAGE_TITLE = getenv("DEFAULT_PAGE_TITLE", "Untitled")
    DUPLICATE_SUFFIX = getenv("DUPLICATE_SUFFIX", " (copy)")  # ajouté au titre d'une page dupliquée

settings = Settings()

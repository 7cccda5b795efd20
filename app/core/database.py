"""Database connection and session management."""
import logging
import os
from datetime import datetime
import pytz
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from app.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def utc_now():
    """Get current datetime in UTC.

    Returns:
        datetime: Current timezone-aware datetime in UTC
    """
    return datetime.now(pytz.utc)


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-based SQLite database."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    directory = os.path.dirname(url.database)
    if directory:
        os.makedirs(directory, exist_ok=True)


_ensure_sqlite_directory(settings.database_url)

# Create SQLAlchemy engine
engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {}
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Initialize database tables.

    Args:
        bind: Engine to create the tables on (defaults to the application engine)
    """
    # Models must be imported so their tables are registered on Base.metadata
    from app.models import holding, token, user  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables initialized")

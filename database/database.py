"""Database helpers: engines, session factories and schema creation.

Snapshot writes and reads go through separate session factories so reads
can be routed to a replica in production.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.config import settings
from .models import Base

# Set WRITE_DATABASE_URL and READ_DATABASE_URL to different instances to split
# reads from writes. Without READ_DATABASE_URL both use the write database.
WRITE_DATABASE_URL = settings.WRITE_DATABASE_URL
READ_DATABASE_URL = settings.read_database_url


def _connect_args(url: str) -> dict:
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


write_engine = create_engine(WRITE_DATABASE_URL, connect_args=_connect_args(WRITE_DATABASE_URL))
read_engine = create_engine(READ_DATABASE_URL, connect_args=_connect_args(READ_DATABASE_URL))

WriteSessionLocal = sessionmaker(bind=write_engine)
ReadSessionLocal = sessionmaker(bind=read_engine)


def init_db():
    """Create the snapshot tables if they do not exist."""
    Base.metadata.create_all(bind=write_engine)


def get_write_session():
    """Yield a write-enabled SQLAlchemy session for the request scope."""
    db = WriteSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_read_session():
    """Yield a read-only SQLAlchemy session for the request scope."""
    db = ReadSessionLocal()
    try:
        yield db
    finally:
        db.close()

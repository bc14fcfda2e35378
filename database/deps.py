"""FastAPI dependencies exposing read and write snapshot sessions."""

from .database import get_read_session, get_write_session


def get_db_write():
    """Yield a write-capable DB session for storing snapshots."""
    yield from get_write_session()


def get_db_read():
    """Yield a read-only DB session for snapshot lookups."""
    yield from get_read_session()

"""Snapshot store: engines, session factories and the snapshot model."""

from .database import (
    WriteSessionLocal,
    ReadSessionLocal,
    init_db,
    get_write_session,
    get_read_session,
)
from .models import Base, CalculationSnapshot

__all__ = [
    "Base",
    "CalculationSnapshot",
    "WriteSessionLocal",
    "ReadSessionLocal",
    "init_db",
    "get_write_session",
    "get_read_session",
]

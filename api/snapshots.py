"""Calculation snapshot API router.

Stores a computed bundle next to the profile that produced it and reads
stored snapshots back. The engine stays stateless; this is the caller-side
persistence adapter.
"""

import json

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.logger import get_logger
from core.repository import SnapshotRepository
from database.deps import get_db_read, get_db_write
from database.models import CalculationSnapshot
from schemas.profile_schema import Profile
from schemas.request_schema import SnapshotListResponse, SnapshotResponse
from services.health_engine import health_engine

logger = get_logger("api.snapshots")
router = APIRouter(prefix="/api/health/snapshots", tags=["snapshots"])


def to_response(snapshot: CalculationSnapshot) -> SnapshotResponse:
    return SnapshotResponse(
        id=snapshot.id,
        profile_hash=snapshot.profile_hash,
        bmr=snapshot.bmr,
        tdee=snapshot.tdee,
        created_at=snapshot.created_at.isoformat() if snapshot.created_at else "",
        profile=json.loads(snapshot.profile_json),
        bundle=json.loads(snapshot.bundle_json),
    )


@router.post("", response_model=SnapshotResponse, status_code=201)
def create_snapshot(profile: Profile, db: Session = Depends(get_db_write)):
    """Calculate a bundle for the profile and store it.

    Args:
        profile: Input profile.
        db: SQLAlchemy session (write) injected by dependency.

    Returns:
        The stored `SnapshotResponse`.

    Raises:
        InputRangeError: If the profile is out of range; nothing is stored.
        DatabaseError: If the write fails.
    """
    bundle = health_engine.calculate_all(profile)
    snapshot = SnapshotRepository(db).save_bundle(profile, bundle)
    return to_response(snapshot)


@router.get("/{snapshot_id}", response_model=SnapshotResponse)
def get_snapshot(snapshot_id: int, db: Session = Depends(get_db_read)):
    """Return one stored snapshot.

    Raises:
        NotFoundError: If no snapshot has this id.
    """
    return to_response(SnapshotRepository(db).get_or_404(snapshot_id))


@router.get("", response_model=SnapshotListResponse)
def list_snapshots(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db_read),
):
    """List stored snapshots, newest first."""
    repo = SnapshotRepository(db)
    snapshots = repo.get_all(skip=skip, limit=limit)
    logger.info("Listing %s snapshots (skip=%s)", len(snapshots), skip)
    return SnapshotListResponse(snapshots=[to_response(s) for s in snapshots], total=repo.count())

"""Repository classes for snapshot persistence.

`BaseRepository` holds the generic operations; `SnapshotRepository` adds
the conversion between `CalculationBundle` objects and stored rows.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import TypeVar, Generic, Type, Optional, List, Any

from core.exceptions import DatabaseError, NotFoundError
from core.logger import get_logger
from database.models import Base, CalculationSnapshot
from schemas.profile_schema import Profile
from schemas.result_schema import CalculationBundle

T = TypeVar('T', bound=Base)

logger = get_logger("core.repository")


class BaseRepository(Generic[T]):
    """Generic repository for common database operations.

    Attributes:
        model: SQLAlchemy model class to operate on.
        session: Database session for executing queries.
    """

    def __init__(self, model: Type[T], session: Session):
        self.model = model
        self.session = session

    def create(self, obj: T) -> T:
        """Add, commit and refresh a new object.

        Raises:
            DatabaseError: If the commit fails; the session is rolled back.
        """
        try:
            self.session.add(obj)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Failed to store %s: %s", self.model.__name__, exc)
            raise DatabaseError(f"Failed to store {self.model.__name__}", operation="create") from exc
        self.session.refresh(obj)
        return obj

    def get_by_id(self, id: Any) -> Optional[T]:
        return self.session.get(self.model, id)

    def get_all(self, skip: int = 0, limit: int = 100) -> List[T]:
        """Retrieve objects newest first, with pagination."""
        return (
            self.session.query(self.model)
            .order_by(self.model.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self) -> int:
        return self.session.query(self.model).count()


class SnapshotRepository(BaseRepository[CalculationSnapshot]):
    """Stores and reads calculation snapshots."""

    def __init__(self, session: Session):
        super().__init__(CalculationSnapshot, session)

    def save_bundle(self, profile: Profile, bundle: CalculationBundle) -> CalculationSnapshot:
        """Persist a profile together with the bundle computed from it."""
        snapshot = CalculationSnapshot(
            profile_hash=profile.profile_hash(),
            profile_json=profile.model_dump_json(),
            bundle_json=bundle.model_dump_json(),
            bmr=bundle.bmr.value,
            tdee=bundle.tdee.value,
            confidence=bundle.confidence.value,
        )
        snapshot = self.create(snapshot)
        logger.info("Stored snapshot %s for profile %s", snapshot.id, snapshot.profile_hash[:12])
        return snapshot

    def get_or_404(self, snapshot_id: int) -> CalculationSnapshot:
        snapshot = self.get_by_id(snapshot_id)
        if snapshot is None:
            raise NotFoundError("Snapshot", snapshot_id)
        return snapshot

    def latest_for_profile(self, profile_hash: str) -> Optional[CalculationSnapshot]:
        return (
            self.session.query(CalculationSnapshot)
            .filter(CalculationSnapshot.profile_hash == profile_hash)
            .order_by(CalculationSnapshot.id.desc())
            .first()
        )

    @staticmethod
    def load_bundle(snapshot: CalculationSnapshot) -> CalculationBundle:
        return CalculationBundle.model_validate_json(snapshot.bundle_json)

"""Profile store: the relational system of record for user and candidate data."""

import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import AccessDeniedError, ProfileNotFoundError, StoreError
from ..models.database import ProfileDB
from ..models.user import Profile, UserRole

logger = logging.getLogger(__name__)


class ProfileStore:
    """
    Access to the profiles table.

    A store bound to a viewer only sees that viewer's own row. The
    unrestricted mode returned by `ProfileStore.admin()` is for the
    ingestion, search and shortlisting pipelines, which must read and
    write across candidates; it is never handed to request handlers
    directly.
    """

    def __init__(self, db: Session, viewer_id: Optional[str] = None, unrestricted: bool = False):
        if viewer_id is None and not unrestricted:
            raise ValueError("A viewer_id is required unless the store is unrestricted")
        self.db = db
        self.viewer_id = viewer_id
        self.unrestricted = unrestricted

    @classmethod
    def admin(cls, db: Session) -> "ProfileStore":
        """Return an unrestricted store for cross-candidate reads and writes."""
        logger.debug("Unrestricted profile store access requested")
        return cls(db, unrestricted=True)

    def _query(self):
        query = self.db.query(ProfileDB)
        if not self.unrestricted:
            query = query.filter(ProfileDB.id == self.viewer_id)
        return query

    def _check_visible(self, profile_id: str) -> None:
        if not self.unrestricted and profile_id != self.viewer_id:
            raise AccessDeniedError("Access to this profile is not allowed")

    def get_record(self, profile_id: str) -> Optional[ProfileDB]:
        """Point lookup returning the ORM row."""
        try:
            return self._query().filter(ProfileDB.id == profile_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Profile lookup failed for {profile_id}: {e}")
            raise StoreError()

    def get(self, profile_id: str) -> Optional[Profile]:
        """Point lookup by ID."""
        record = self.get_record(profile_id)
        return Profile.model_validate(record) if record else None

    def get_many(self, profile_ids: Iterable[str], role: Optional[UserRole] = None) -> List[Profile]:
        """
        Batch lookup by ID list in a single query.

        Args:
            profile_ids: IDs to fetch; missing IDs are simply absent from the result
            role: Optional role filter

        Returns:
            Profiles found, in no particular order
        """
        ids = list(dict.fromkeys(profile_ids))
        if not ids:
            return []
        try:
            query = self._query().filter(ProfileDB.id.in_(ids))
            if role is not None:
                query = query.filter(ProfileDB.role == role)
            return [Profile.model_validate(record) for record in query.all()]
        except SQLAlchemyError as e:
            logger.error(f"Batch profile lookup failed: {e}")
            raise StoreError()

    def list_by_role(self, role: UserRole) -> List[Profile]:
        """Filtered lookup by role."""
        try:
            records = self._query().filter(ProfileDB.role == role).order_by(ProfileDB.created_at).all()
            return [Profile.model_validate(record) for record in records]
        except SQLAlchemyError as e:
            logger.error(f"Profile lookup by role {role.value} failed: {e}")
            raise StoreError()

    def update_fields(self, profile_id: str, **fields: Any) -> Profile:
        """
        Update several fields of one profile in a single commit.

        Raises:
            ProfileNotFoundError: If the profile does not exist
            StoreError: If the write fails; nothing is committed
        """
        self._check_visible(profile_id)
        record = self.get_record(profile_id)
        if record is None:
            raise ProfileNotFoundError()

        try:
            for key, value in fields.items():
                if not hasattr(ProfileDB, key):
                    raise ValueError(f"Unknown profile field: {key}")
                setattr(record, key, value)
            record.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Profile update failed for {profile_id}: {e}")
            raise StoreError()

        return Profile.model_validate(record)

    def insert(self, **fields: Any) -> Profile:
        """
        Insert a new profile.

        Raises:
            StoreError: If the insert fails
        """
        record = ProfileDB(**fields)
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Profile insert failed: {e}")
            raise StoreError()
        return Profile.model_validate(record)

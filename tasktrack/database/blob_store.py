"""Key-value blob storage backed by the stored_blobs table."""

import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from tasktrack.database.models import StoredBlobDB

logger = logging.getLogger(__name__)


class BlobStore:
    """Read and overwrite opaque string values by key."""

    def __init__(self, db: Session):
        self.db = db

    def read(self, key: str, fresh: bool = False) -> Optional[str]:
        """Return the stored value, or None if the key is absent.

        With ``fresh`` the session's open read transaction is ended first, so
        values committed by other sessions are visible.
        """
        if fresh:
            self.db.rollback()
        row = self.db.query(StoredBlobDB).filter(StoredBlobDB.key == key).first()
        return row.value if row else None

    def write(self, key: str, value: str) -> None:
        """Overwrite the value stored under key."""
        row = self.db.query(StoredBlobDB).filter(StoredBlobDB.key == key).first()
        try:
            if row is None:
                self.db.add(StoredBlobDB(key=key, value=value, updated_at=datetime.utcnow()))
            else:
                row.value = value
                row.updated_at = datetime.utcnow()
            self.db.commit()
            logger.debug(f"Wrote blob {key} ({len(value)} chars)")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to write blob {key}: {type(e).__name__}: {str(e)}")
            raise


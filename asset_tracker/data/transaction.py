"""
Transaction boundary for multi-write operations

Business operations stage their writes (state row, assignment row, history
row) on the session and let atomic() commit them together. Any exception rolls
the whole unit back; unique-key collisions come out as domain errors.
"""

from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import IntegrityError

from asset_tracker import db
from asset_tracker.buisness.core.errors import AlreadyAssignedError, AssetTrackerError, ConflictError
from asset_tracker.utils.logger import get_logger

logger = get_logger("asset_tracker.data.transaction")

OPEN_ASSIGNMENT_INDEX = 'uq_asset_assignments_open'

# SQLite reports the column rather than the index name
_OPEN_ASSIGNMENT_MARKERS = (OPEN_ASSIGNMENT_INDEX, 'asset_assignments.asset_id')


def is_open_assignment_collision(error: IntegrityError) -> bool:
    text = str(getattr(error, 'orig', error))
    return any(marker in text for marker in _OPEN_ASSIGNMENT_MARKERS)


@contextmanager
def atomic(conflict: Optional[AssetTrackerError] = None):
    """
    Run a block of writes as one transaction.

    Args:
        conflict: Error to raise for unique-key collisions other than the
            open-assignment index (defaults to a generic ConflictError)

    Raises:
        AlreadyAssignedError: If a concurrent assign already opened an assignment
        ConflictError: For any other unique-key collision
    """
    try:
        yield db.session
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if is_open_assignment_collision(e):
            logger.warning("Concurrent assignment lost the race on the open-assignment index")
            raise AlreadyAssignedError() from e
        logger.warning(f"Unique constraint violated: {e.orig}")
        raise (conflict or ConflictError()) from e
    except Exception:
        db.session.rollback()
        raise

"""Retention maintenance for stored training sessions."""
import logging

from sqlalchemy.orm import Session

from vocabtrainer import monitoring
from vocabtrainer.models.models import TrainingSession

logger = logging.getLogger(__name__)


class RetentionService:
    """Deletes the oldest sessions, whatever their completion state."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def prune_oldest(self, count: int) -> int:
        """Delete the ``count`` sessions with the earliest start time."""
        oldest = (
            self.db.query(TrainingSession)
            .order_by(TrainingSession.started_at.asc(), TrainingSession.id.asc())
            .limit(count)
            .all()
        )
        try:
            for session in oldest:
                self.db.delete(session)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error pruning {len(oldest)} training sessions: {e}")
            raise

        monitoring.sessions_pruned.inc(len(oldest))
        logger.info(f"Pruned {len(oldest)} training sessions")
        return len(oldest)

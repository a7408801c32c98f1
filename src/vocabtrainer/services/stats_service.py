"""Statistics over completed training sessions."""
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from vocabtrainer.config import settings
from vocabtrainer.models.models import TrainingSession
from vocabtrainer.models.training_models import (
    RecentSessionView,
    ReviewMode,
    TrainingStats,
    accuracy,
)


class StatsService:
    """Service for aggregating review statistics."""

    def __init__(self, db: Session, recent_limit: Optional[int] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.recent_limit = recent_limit or settings.training.recent_sessions_limit

    def get_completed_sessions(self) -> List[TrainingSession]:
        """Get completed sessions, latest completion first."""
        return (
            self.db.query(TrainingSession)
            .filter(TrainingSession.completed_at.isnot(None))
            .order_by(TrainingSession.completed_at.desc(), TrainingSession.id.desc())
            .all()
        )

    def get_training_stats(self) -> TrainingStats:
        """Compute aggregate statistics; sessions still in progress are ignored."""
        sessions = self.get_completed_sessions()

        total_words = sum(session.total_words for session in sessions)
        total_correct = sum(session.correct_answers for session in sessions)

        words_by_mode: Dict[ReviewMode, int] = defaultdict(int)
        correct_by_mode: Dict[ReviewMode, int] = defaultdict(int)
        for session in sessions:
            words_by_mode[session.review_mode] += session.total_words
            correct_by_mode[session.review_mode] += session.correct_answers

        return TrainingStats(
            total_sessions=len(sessions),
            total_words_reviewed=total_words,
            average_accuracy=accuracy(total_correct, total_words),
            recent_sessions=[
                RecentSessionView.from_entity(session)
                for session in sessions[: self.recent_limit]
            ],
            accuracy_by_review_mode={
                mode: accuracy(correct_by_mode[mode], words)
                for mode, words in words_by_mode.items()
            },
        )

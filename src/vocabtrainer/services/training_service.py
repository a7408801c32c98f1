"""Training service for starting, answering and completing review sessions."""
import logging
import random
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vocabtrainer import monitoring
from vocabtrainer.config import settings
from vocabtrainer.exceptions import (
    InvalidArgumentError,
    SessionNotFoundError,
    WordNotFoundError,
)
from vocabtrainer.models.base import utcnow
from vocabtrainer.models.models import (
    TrainingSession,
    TrainingSessionResult,
    TrainingSessionWord,
    Word,
)
from vocabtrainer.models.training_models import (
    ReviewMode,
    TrainingResult,
    TrainingSessionView,
    TrainingStats,
    parse_enum,
)
from vocabtrainer.services.progress_service import ProgressService
from vocabtrainer.services.retention_service import RetentionService
from vocabtrainer.services.session_builder import SessionBuilder
from vocabtrainer.services.stats_service import StatsService
from vocabtrainer.services.word_service import WordService

logger = logging.getLogger(__name__)

# Attempts for a result whose first progress insert lost a race
RECORD_RESULT_ATTEMPTS = 2


class TrainingService:
    """Service for managing training sessions and their results."""

    def __init__(self, db: Session, rng: Optional[random.Random] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.word_service = WordService(db)
        self.progress_service = ProgressService(db)
        self.builder = SessionBuilder(self.word_service, rng=rng)
        self.stats_service = StatsService(db)
        self.retention_service = RetentionService(db)

    def _validate_session_length(self, session_length: Optional[int]) -> int:
        if session_length is None:
            return settings.training.default_session_length
        max_length = settings.training.max_session_length
        if isinstance(session_length, bool) or not isinstance(session_length, int) \
           or session_length < 1 or session_length > max_length:
            logger.warning(f"Rejected session length: {session_length!r}")
            raise InvalidArgumentError(
                f"Session length must be between 1 and {max_length}",
                field_name="session_length",
                rejected_value=session_length,
            )
        return session_length

    def start_session(
        self,
        review_mode: Union[ReviewMode, str],
        session_length: Optional[int] = None,
    ) -> TrainingSession:
        """Create a session and store its words in presentation order.

        Returns a session with fewer words than requested when the pools
        run short, and an empty session when they are all empty.
        """
        review_mode = parse_enum(ReviewMode, review_mode, "review_mode")
        session_length = self._validate_session_length(session_length)

        words = self.builder.select_words(review_mode, session_length)

        session = TrainingSession(
            review_mode=review_mode,
            started_at=utcnow(),
            total_words=len(words),
            correct_answers=0,
        )
        try:
            self.db.add(session)
            self.db.flush()
            self._add_words_to_session(session, words)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error starting {review_mode.name} session: {e}")
            raise
        self.db.refresh(session)

        monitoring.sessions_started.labels(review_mode=review_mode.name).inc()
        monitoring.session_size.labels(review_mode=review_mode.name).observe(len(words))
        logger.info(
            f"Started {review_mode.name} session {session.id} with {len(words)} of "
            f"{session_length} requested words"
        )
        return session

    def _add_words_to_session(self, session: TrainingSession, words: List[Word]) -> List[TrainingSessionWord]:
        session_words = [
            TrainingSessionWord(session_id=session.id, word_id=word.id, word_order=index)
            for index, word in enumerate(words)
        ]
        self.db.add_all(session_words)
        return session_words

    def get_session(self, session_id: int) -> Optional[TrainingSession]:
        """Get a session by its ID."""
        return self.db.query(TrainingSession).filter(TrainingSession.id == session_id).first()

    def get_session_or_raise(self, session_id: int) -> TrainingSession:
        """Get a session by its ID or raise SessionNotFoundError."""
        session = self.get_session(session_id)
        if not session:
            logger.warning(f"Training session {session_id} not found")
            monitoring.error_count.labels(error_type="SessionNotFoundError").inc()
            raise SessionNotFoundError(session_id)
        return session

    def get_session_words(self, session_id: int) -> List[Word]:
        """Get the words of a session ordered by their position."""
        self.get_session_or_raise(session_id)
        words = (
            self.db.query(Word)
            .join(TrainingSessionWord, TrainingSessionWord.word_id == Word.id)
            .filter(TrainingSessionWord.session_id == session_id)
            .order_by(TrainingSessionWord.word_order)
            .all()
        )
        logger.debug(f"Retrieved {len(words)} words for session {session_id}")
        return words

    def get_session_view(self, session_id: int) -> TrainingSessionView:
        """Get a session together with its ordered words."""
        session = self.get_session_or_raise(session_id)
        return TrainingSessionView.from_entity(session, self.get_session_words(session_id))

    def record_result(
        self,
        session_id: int,
        word_id: int,
        result: Union[TrainingResult, str],
    ) -> TrainingSessionResult:
        """Store an answer and update the word's progress.

        The word does not have to belong to the session's selection.
        """
        result = parse_enum(TrainingResult, result, "result")
        for attempt in range(1, RECORD_RESULT_ATTEMPTS + 1):
            try:
                return self._record_result(session_id, word_id, result)
            except IntegrityError:
                if attempt == RECORD_RESULT_ATTEMPTS:
                    monitoring.error_count.labels(error_type="IntegrityError").inc()
                    logger.error(
                        f"Giving up recording result for word {word_id} after {attempt} attempts"
                    )
                    raise
                logger.warning(
                    f"Concurrent progress insert for word {word_id}, retrying result"
                )

    def _record_result(
        self, session_id: int, word_id: int, result: TrainingResult
    ) -> TrainingSessionResult:
        with self.progress_service.word_lock(word_id):
            session = self.get_session_or_raise(session_id)
            word = self.word_service.get_word(word_id)
            if not word:
                logger.warning(f"Cannot record {result.name} for unknown word {word_id}")
                monitoring.error_count.labels(error_type="WordNotFoundError").inc()
                raise WordNotFoundError(word_id)

            try:
                session_result = TrainingSessionResult(
                    session_id=session.id,
                    word_id=word.id,
                    result=result,
                    recorded_at=utcnow(),
                )
                self.db.add(session_result)

                if result == TrainingResult.CORRECT:
                    # Incremented in SQL, answers to other words are not serialized
                    session.correct_answers = TrainingSession.correct_answers + 1

                self.progress_service.apply_outcome(word, result)
                self.db.commit()
            except Exception as e:
                self.db.rollback()
                logger.error(
                    f"Error recording {result.name} for word {word_id} in session {session_id}: {e}"
                )
                raise

        if not self._is_in_session(session_id, word_id):
            logger.debug(f"Word {word_id} answered outside the selection of session {session_id}")
        monitoring.results_recorded.labels(result=result.name).inc()
        self.db.refresh(session_result)
        return session_result

    def _is_in_session(self, session_id: int, word_id: int) -> bool:
        return (
            self.db.query(TrainingSessionWord.id)
            .filter(
                TrainingSessionWord.session_id == session_id,
                TrainingSessionWord.word_id == word_id,
            )
            .first()
            is not None
        )

    def get_session_results(self, session_id: int) -> List[TrainingSessionResult]:
        """Get the answers recorded for a session."""
        self.get_session_or_raise(session_id)
        return (
            self.db.query(TrainingSessionResult)
            .filter(TrainingSessionResult.session_id == session_id)
            .order_by(TrainingSessionResult.id)
            .all()
        )

    def complete_session(self, session_id: int) -> TrainingSession:
        """Mark a session as completed.

        Completing an already completed session overwrites ``completed_at``.
        """
        session = self.get_session_or_raise(session_id)
        if session.completed_at is not None:
            logger.info(f"Session {session_id} completed again, overwriting completion time")

        try:
            session.completed_at = utcnow()
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error completing session {session_id}: {e}")
            raise
        self.db.refresh(session)

        monitoring.sessions_completed.labels(review_mode=session.review_mode.name).inc()
        logger.info(
            f"Completed session {session_id}: {session.correct_answers}/{session.total_words} correct"
        )
        return session

    def get_training_stats(self) -> TrainingStats:
        """Get aggregate statistics over completed sessions."""
        return self.stats_service.get_training_stats()

    def prune_oldest_sessions(self, count: int) -> int:
        """Delete the oldest sessions and return how many were removed."""
        max_count = settings.training.max_prune_count
        if isinstance(count, bool) or not isinstance(count, int) or count < 1 or count > max_count:
            logger.warning(f"Rejected prune count: {count!r}")
            raise InvalidArgumentError(
                f"Count must be between 1 and {max_count}",
                field_name="count",
                rejected_value=count,
            )
        return self.retention_service.prune_oldest(count)

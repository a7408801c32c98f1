"""Per-word progress counters and the mastery ladder."""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import ClassVar, Dict, Iterator, Optional

from sqlalchemy.orm import Session

from vocabtrainer import monitoring
from vocabtrainer.config import settings
from vocabtrainer.exceptions import WordNotFoundError
from vocabtrainer.models.base import utcnow
from vocabtrainer.models.models import Word, WordProgress
from vocabtrainer.models.training_models import MasteryLevel, TrainingResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MasteryThresholds:
    """Counter values that promote a word to the next level."""
    learning_streak: int = 3
    known_correct: int = 10
    mastered_correct: int = 15

    @classmethod
    def from_settings(cls) -> "MasteryThresholds":
        return cls(
            learning_streak=settings.training.learning_streak_threshold,
            known_correct=settings.training.known_correct_threshold,
            mastered_correct=settings.training.mastered_correct_threshold,
        )


def next_mastery_level(
    level: Optional[MasteryLevel],
    consecutive_correct: int,
    total_correct: int,
    thresholds: MasteryThresholds = MasteryThresholds(),
) -> MasteryLevel:
    """Return the level a word reaches after a correct answer.

    At most one rung is climbed per call and a level is never lowered.
    """
    level = level or MasteryLevel.NEW
    if level == MasteryLevel.NEW:
        if consecutive_correct >= thresholds.learning_streak:
            return MasteryLevel.LEARNING
    elif level == MasteryLevel.LEARNING:
        if total_correct >= thresholds.known_correct:
            return MasteryLevel.KNOWN
    elif level == MasteryLevel.KNOWN:
        if total_correct >= thresholds.mastered_correct:
            return MasteryLevel.MASTERED
    return level


class ProgressService:
    """Service for updating word progress after each answer.

    Answers to one word are serialized through a process-wide registry of
    locks keyed by word id. Entries are never evicted, so the registry holds
    at most one lock per word in the vocabulary.
    """
    _registry_lock: ClassVar[threading.Lock] = threading.Lock()
    _word_locks: ClassVar[Dict[int, threading.Lock]] = {}

    def __init__(self, db: Session, thresholds: Optional[MasteryThresholds] = None):
        """Initialize the service with a database session."""
        self.db = db
        self.thresholds = thresholds or MasteryThresholds.from_settings()

    @classmethod
    @contextmanager
    def word_lock(cls, word_id: int) -> Iterator[None]:
        """Serialize read-modify-write cycles on one word's counters."""
        with cls._registry_lock:
            lock = cls._word_locks.setdefault(word_id, threading.Lock())
        with lock:
            yield

    def get_progress(self, word_id: int) -> Optional[WordProgress]:
        """Get the progress record of a word, if it has one."""
        return self.db.query(WordProgress).filter(WordProgress.word_id == word_id).first()

    def _find_or_create(self, word: Word) -> WordProgress:
        progress = (
            self.db.query(WordProgress)
            .filter(WordProgress.word_id == word.id)
            .with_for_update()
            .first()
        )
        if progress is None:
            progress = WordProgress(
                word_id=word.id,
                total_attempts=0,
                total_correct=0,
                consecutive_correct=0,
            )
            self.db.add(progress)
        return progress

    def apply_outcome(self, word: Word, result: TrainingResult) -> WordProgress:
        """Update counters and mastery level without committing.

        Callers own the transaction and should hold ``word_lock(word.id)``
        until it is committed.
        """
        progress = self._find_or_create(word)
        now = utcnow()

        progress.total_attempts += 1
        progress.last_reviewed_at = now

        if result == TrainingResult.CORRECT:
            progress.total_correct += 1
            progress.consecutive_correct += 1
            self._update_mastery_level(word, progress, now)
        elif result == TrainingResult.INCORRECT:
            progress.consecutive_correct = 0
        # SKIPPED only counts as an attempt

        self.db.flush()
        return progress

    def _update_mastery_level(self, word: Word, progress: WordProgress, now) -> None:
        current = word.mastery_level or MasteryLevel.NEW
        new_level = next_mastery_level(
            current,
            progress.consecutive_correct,
            progress.total_correct,
            self.thresholds,
        )
        if new_level != current:
            word.mastery_level = new_level
            progress.mastery_level_updated_at = now
            monitoring.mastery_transitions.labels(
                from_level=current.name, to_level=new_level.name
            ).inc()
            logger.info(f"Word {word.id} promoted from {current.name} to {new_level.name}")

    def record_outcome(self, word_id: int, result: TrainingResult) -> WordProgress:
        """Record one answer for a word as its own unit of work."""
        with self.word_lock(word_id):
            word = self.db.query(Word).filter(Word.id == word_id).first()
            if not word:
                logger.warning(f"Cannot record {result.name} for unknown word {word_id}")
                monitoring.error_count.labels(error_type="WordNotFoundError").inc()
                raise WordNotFoundError(word_id)
            try:
                progress = self.apply_outcome(word, result)
                self.db.commit()
            except Exception as e:
                self.db.rollback()
                logger.error(f"Error recording {result.name} for word {word_id}: {e}")
                raise
        self.db.refresh(progress)
        return progress

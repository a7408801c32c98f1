"""Word selection for new training sessions."""
import logging
import random
from typing import List, Optional, Sequence, Tuple

from vocabtrainer.models.models import Word
from vocabtrainer.models.training_models import MasteryLevel, ReviewMode
from vocabtrainer.services.word_service import WordService

logger = logging.getLogger(__name__)

NEW_POOL = (MasteryLevel.NEW,)
LEARNING_POOL = (MasteryLevel.LEARNING,)
KNOWN_POOL = (MasteryLevel.KNOWN, MasteryLevel.MASTERED)

POOLS = {
    ReviewMode.NEW: NEW_POOL,
    ReviewMode.LEARNING: LEARNING_POOL,
    ReviewMode.KNOWN: KNOWN_POOL,
}


def mixed_quotas(session_length: int) -> Tuple[int, int, int]:
    """Split a MIXED session into (new, learning, known) quotas.

    Each quota is capped by its own pool only; a short pool is not topped up
    from the others.
    """
    new_count = session_length // 3
    learning_count = session_length // 3
    return new_count, learning_count, session_length - new_count - learning_count


class SessionBuilder:
    """Chooses the words of a session from pools partitioned by mastery level."""

    def __init__(self, word_service: WordService, rng: Optional[random.Random] = None):
        self.word_service = word_service
        self.rng = rng or random.Random()

    def _draw(self, levels: Sequence[MasteryLevel], count: int) -> List[Word]:
        """Draw up to ``count`` distinct words uniformly from the pool."""
        if count <= 0:
            return []
        pool = self.word_service.list_by_mastery_level(*levels)
        if len(pool) < count:
            logger.debug(
                f"Pool {[level.name for level in levels]} has {len(pool)} words, wanted {count}"
            )
        return self.rng.sample(pool, min(len(pool), count))

    def select_words(self, review_mode: ReviewMode, session_length: int) -> List[Word]:
        """Return the words of a session in presentation order."""
        if review_mode != ReviewMode.MIXED:
            return self._draw(POOLS[review_mode], session_length)

        new_quota, learning_quota, known_quota = mixed_quotas(session_length)
        new_words = self._draw(NEW_POOL, new_quota)
        learning_words = self._draw(LEARNING_POOL, learning_quota)
        known_words = self._draw(KNOWN_POOL, known_quota)
        logger.debug(
            f"Mixed selection: {len(new_words)} new, {len(learning_words)} learning, "
            f"{len(known_words)} known"
        )

        words = new_words + learning_words + known_words
        self.rng.shuffle(words)
        return words

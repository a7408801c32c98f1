"""Item lookup over the vocabulary owned by the word-management service."""
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from vocabtrainer.exceptions import WordNotFoundError
from vocabtrainer.models.models import Word
from vocabtrainer.models.training_models import MasteryLevel


class WordService:
    """Read access to words, plus the seeding helpers used by the CLI and tests."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def get_word(self, word_id: int) -> Optional[Word]:
        """Get a word by its ID."""
        return self.db.query(Word).filter(Word.id == word_id).first()

    def get_word_or_raise(self, word_id: int) -> Word:
        """Get a word by its ID or raise WordNotFoundError."""
        word = self.get_word(word_id)
        if not word:
            raise WordNotFoundError(word_id)
        return word

    def list_by_mastery_level(self, *levels: MasteryLevel) -> List[Word]:
        """Get all words whose mastery level is one of ``levels``."""
        if not levels:
            return []
        return (
            self.db.query(Word)
            .filter(Word.mastery_level.in_(levels))
            .order_by(Word.id)
            .all()
        )

    def count_by_mastery_level(self) -> Dict[MasteryLevel, int]:
        """Get the number of words on each rung of the ladder."""
        counts = {level: 0 for level in MasteryLevel}
        rows = (
            self.db.query(Word.mastery_level, func.count(Word.id))
            .group_by(Word.mastery_level)
            .all()
        )
        for level, count in rows:
            counts[level] = count
        return counts

    def create_word(
        self,
        text: str,
        translation: Optional[str] = None,
        mastery_level: MasteryLevel = MasteryLevel.NEW,
    ) -> Word:
        """Create a new word."""
        word = Word(text=text, translation=translation, mastery_level=mastery_level)
        self.db.add(word)
        self.db.commit()
        self.db.refresh(word)
        return word

    def create_words(self, texts: List[str], mastery_level: MasteryLevel = MasteryLevel.NEW) -> List[Word]:
        """Create multiple words at once."""
        words = [Word(text=text, mastery_level=mastery_level) for text in texts]
        self.db.add_all(words)
        self.db.commit()
        for word in words:
            self.db.refresh(word)
        return words

    def get_word_count(self) -> int:
        """Get the count of words in the database."""
        return self.db.query(Word).count()

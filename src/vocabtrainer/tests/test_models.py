"""Tests for database models."""
import pytest
from faker import Faker
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vocabtrainer.models.models import (
    TrainingSession,
    TrainingSessionResult,
    TrainingSessionWord,
    Word,
    WordProgress,
)
from vocabtrainer.models.training_models import MasteryLevel, ReviewMode, TrainingResult

fake = Faker()


def test_word_creation(db: Session) -> None:
    """Test word creation."""
    word = Word(text="hello", translation="привіт")
    db.add(word)
    db.commit()
    db.refresh(word)

    assert word.id is not None
    assert word.text == "hello"
    assert word.translation == "привіт"
    assert word.mastery_level == MasteryLevel.NEW
    assert word.created_at is not None
    assert word.progress is None


def test_word_progress_is_unique_per_word(db: Session) -> None:
    """Test a word can have only one progress record."""
    word = Word(text=fake.word())
    db.add(word)
    db.commit()

    db.add(WordProgress(word_id=word.id))
    db.commit()
    db.add(WordProgress(word_id=word.id))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_word_progress_defaults(db: Session) -> None:
    """Test progress counters start at zero."""
    word = Word(text=fake.word())
    db.add(word)
    db.commit()

    progress = WordProgress(word_id=word.id)
    db.add(progress)
    db.commit()
    db.refresh(progress)

    assert progress.total_attempts == 0
    assert progress.total_correct == 0
    assert progress.consecutive_correct == 0
    assert progress.last_reviewed_at is None
    assert progress.mastery_level_updated_at is None
    assert word.progress.id == progress.id


def test_training_session_creation(db: Session) -> None:
    """Test training session defaults."""
    session = TrainingSession(review_mode=ReviewMode.MIXED)
    db.add(session)
    db.commit()
    db.refresh(session)

    assert session.id is not None
    assert session.session_type == "FLASHCARD"
    assert session.started_at is not None
    assert session.completed_at is None
    assert session.is_completed is False
    assert session.total_words == 0
    assert session.correct_answers == 0


def test_session_children_deleted_with_session(db: Session) -> None:
    """Test deleting a session removes its words and results but not the words themselves."""
    word = Word(text=fake.word())
    session = TrainingSession(review_mode=ReviewMode.NEW, total_words=1)
    db.add_all([word, session])
    db.flush()
    session.session_words.append(TrainingSessionWord(word_id=word.id, word_order=0))
    session.results.append(TrainingSessionResult(word_id=word.id, result=TrainingResult.INCORRECT))
    db.commit()

    db.delete(session)
    db.commit()

    assert db.query(TrainingSessionWord).count() == 0
    assert db.query(TrainingSessionResult).count() == 0
    assert db.query(Word).count() == 1


def test_session_words_ordered(db: Session) -> None:
    """Test the relationship returns words by position."""
    words = [Word(text=fake.word()) for _ in range(3)]
    session = TrainingSession(review_mode=ReviewMode.NEW, total_words=3)
    db.add_all(words + [session])
    db.flush()
    for order in (2, 0, 1):
        db.add(TrainingSessionWord(session_id=session.id, word_id=words[order].id, word_order=order))
    db.commit()
    db.expire(session)

    assert [row.word_order for row in session.session_words] == [0, 1, 2]
    assert [row.word_id for row in session.session_words] == [word.id for word in words]

"""Database models for the training engine."""
from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from vocabtrainer.models.base import Base, TimestampMixin, utcnow
from vocabtrainer.models.training_models import MasteryLevel, ReviewMode, TrainingResult


class Word(Base, TimestampMixin):
    """Vocabulary item owned by the word-management service."""

    __tablename__ = "words"

    id = Column(Integer, primary_key=True)
    text = Column(String, nullable=False)
    translation = Column(String)
    # Written only by the progress tracker
    mastery_level = Column(
        Enum(MasteryLevel, name="mastery_level"),
        nullable=False,
        default=MasteryLevel.NEW,
        index=True,
    )

    # Relationships
    progress = relationship("WordProgress", back_populates="word", uselist=False)

    def __repr__(self) -> str:
        return f"<Word id={self.id} text={self.text!r} level={self.mastery_level}>"


class WordProgress(Base, TimestampMixin):
    """Aggregate review counters for a word."""

    __tablename__ = "word_progress"

    id = Column(Integer, primary_key=True)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False, unique=True)
    total_attempts = Column(Integer, nullable=False, default=0)
    total_correct = Column(Integer, nullable=False, default=0)
    consecutive_correct = Column(Integer, nullable=False, default=0)
    last_reviewed_at = Column(DateTime(timezone=True))
    mastery_level_updated_at = Column(DateTime(timezone=True))

    # Relationships
    word = relationship("Word", back_populates="progress")


class TrainingSession(Base, TimestampMixin):
    """One review run over a fixed, ordered selection of words."""

    __tablename__ = "training_sessions"

    id = Column(Integer, primary_key=True)
    session_type = Column(String, nullable=False, default="FLASHCARD")
    review_mode = Column(Enum(ReviewMode, name="review_mode"), nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    completed_at = Column(DateTime(timezone=True), index=True)
    total_words = Column(Integer, nullable=False, default=0)
    correct_answers = Column(Integer, nullable=False, default=0)

    # Relationships
    session_words = relationship(
        "TrainingSessionWord",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="TrainingSessionWord.word_order",
    )
    results = relationship(
        "TrainingSessionResult",
        back_populates="session",
        cascade="all, delete-orphan",
    )

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


class TrainingSessionWord(Base, TimestampMixin):
    """A word selected for a session at a fixed position."""

    __tablename__ = "training_session_words"

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("training_sessions.id"), nullable=False, index=True)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False)
    word_order = Column(Integer, nullable=False)  # zero-based presentation position

    # Relationships
    session = relationship("TrainingSession", back_populates="session_words")
    word = relationship("Word")


class TrainingSessionResult(Base, TimestampMixin):
    """An answer submitted during a session."""

    __tablename__ = "training_session_results"

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("training_sessions.id"), nullable=False, index=True)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False)
    result = Column(Enum(TrainingResult, name="training_result"), nullable=False)
    recorded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    session = relationship("TrainingSession", back_populates="results")
    word = relationship("Word")

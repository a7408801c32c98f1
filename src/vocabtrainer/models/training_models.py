"""Enums and response structures for training sessions."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from vocabtrainer.exceptions import InvalidArgumentError

E = TypeVar("E", bound=Enum)


class MasteryLevel(Enum):
    """Position of a word on the learning ladder."""
    NEW = "NEW"
    LEARNING = "LEARNING"
    KNOWN = "KNOWN"
    MASTERED = "MASTERED"

    @property
    def rank(self) -> int:
        return _MASTERY_ORDER.index(self)


_MASTERY_ORDER = [
    MasteryLevel.NEW,
    MasteryLevel.LEARNING,
    MasteryLevel.KNOWN,
    MasteryLevel.MASTERED,
]


class ReviewMode(Enum):
    """Pool selection strategy for a session."""
    NEW = "NEW"  # Only new words
    LEARNING = "LEARNING"  # Only words being learned
    KNOWN = "KNOWN"  # Known and mastered words
    MIXED = "MIXED"  # A third new, a third learning, the rest known


class TrainingResult(Enum):
    """Outcome recorded for one answered word."""
    CORRECT = "CORRECT"
    INCORRECT = "INCORRECT"
    SKIPPED = "SKIPPED"


def parse_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    """Coerce a string or enum member into ``enum_cls``."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper()]
        except KeyError:
            pass
    valid = ", ".join(member.name for member in enum_cls)
    raise InvalidArgumentError(
        f"Invalid {field_name} '{value}'. Valid values are: {valid}",
        field_name=field_name,
        rejected_value=value,
    )


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def accuracy(correct: int, total: int) -> float:
    """Percentage of correct answers, 0 when nothing was reviewed."""
    if total <= 0:
        return 0.0
    return correct / total * 100


@dataclass
class WordView:
    """A word as presented in a session."""
    id: int
    text: str
    translation: Optional[str]
    mastery_level: MasteryLevel

    @classmethod
    def from_entity(cls, word) -> "WordView":
        return cls(
            id=word.id,
            text=word.text,
            translation=word.translation,
            mastery_level=word.mastery_level,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "translation": self.translation,
            "mastery_level": self.mastery_level.name,
        }


@dataclass
class TrainingSessionView:
    """Session header together with its ordered words."""
    id: int
    session_type: str
    review_mode: ReviewMode
    started_at: datetime
    completed_at: Optional[datetime]
    total_words: int
    correct_answers: int
    words: List[WordView] = field(default_factory=list)

    @classmethod
    def from_entity(cls, session, words=()) -> "TrainingSessionView":
        return cls(
            id=session.id,
            session_type=session.session_type,
            review_mode=session.review_mode,
            started_at=session.started_at,
            completed_at=session.completed_at,
            total_words=session.total_words,
            correct_answers=session.correct_answers,
            words=[WordView.from_entity(word) for word in words],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "session_type": self.session_type,
            "review_mode": self.review_mode.name,
            "started_at": _isoformat(self.started_at),
            "completed_at": _isoformat(self.completed_at),
            "total_words": self.total_words,
            "correct_answers": self.correct_answers,
            "words": [word.to_dict() for word in self.words],
        }


@dataclass
class RecentSessionView:
    """Summary of a completed session for the statistics page."""
    id: int
    completed_at: datetime
    review_mode: ReviewMode
    total_words: int
    correct_answers: int
    accuracy: float

    @classmethod
    def from_entity(cls, session) -> "RecentSessionView":
        return cls(
            id=session.id,
            completed_at=session.completed_at,
            review_mode=session.review_mode,
            total_words=session.total_words,
            correct_answers=session.correct_answers,
            accuracy=accuracy(session.correct_answers, session.total_words),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "completed_at": _isoformat(self.completed_at),
            "review_mode": self.review_mode.name,
            "total_words": self.total_words,
            "correct_answers": self.correct_answers,
            "accuracy": self.accuracy,
        }


@dataclass
class TrainingStats:
    """Aggregate statistics over completed sessions."""
    total_sessions: int = 0
    total_words_reviewed: int = 0
    average_accuracy: float = 0.0
    recent_sessions: List[RecentSessionView] = field(default_factory=list)
    accuracy_by_review_mode: Dict[ReviewMode, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_sessions": self.total_sessions,
            "total_words_reviewed": self.total_words_reviewed,
            "average_accuracy": self.average_accuracy,
            "recent_sessions": [session.to_dict() for session in self.recent_sessions],
            "accuracy_by_review_mode": {
                mode.name: value for mode, value in self.accuracy_by_review_mode.items()
            },
        }

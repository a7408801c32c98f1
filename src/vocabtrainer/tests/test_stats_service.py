"""Tests for training statistics."""
from datetime import datetime, timedelta
from typing import Optional

import pytest
from sqlalchemy.orm import Session

from vocabtrainer.models.models import TrainingSession
from vocabtrainer.models.training_models import ReviewMode
from vocabtrainer.services.stats_service import StatsService

BASE_TIME = datetime(2024, 3, 1, 9, 0, 0)


@pytest.fixture
def stats_service(db: Session) -> StatsService:
    """Create a stats service instance."""
    return StatsService(db, recent_limit=10)


def _session(
    db: Session,
    mode: ReviewMode,
    total_words: int,
    correct: int,
    completed_at: Optional[datetime] = BASE_TIME,
) -> TrainingSession:
    session = TrainingSession(
        review_mode=mode,
        started_at=BASE_TIME - timedelta(minutes=30),
        completed_at=completed_at,
        total_words=total_words,
        correct_answers=correct,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def test_stats_without_sessions(stats_service: StatsService) -> None:
    """Test statistics over an empty history."""
    stats = stats_service.get_training_stats()
    assert stats.total_sessions == 0
    assert stats.total_words_reviewed == 0
    assert stats.average_accuracy == 0
    assert stats.recent_sessions == []
    assert stats.accuracy_by_review_mode == {}


def test_stats_over_two_modes(db: Session, stats_service: StatsService) -> None:
    """Test totals and accuracies for a MIXED and a NEW session."""
    _session(db, ReviewMode.MIXED, 10, 8)
    _session(db, ReviewMode.NEW, 5, 5, BASE_TIME + timedelta(hours=1))

    stats = stats_service.get_training_stats()

    assert stats.total_sessions == 2
    assert stats.total_words_reviewed == 15
    assert stats.average_accuracy == pytest.approx(86.67, abs=0.01)
    assert stats.accuracy_by_review_mode == {
        ReviewMode.MIXED: pytest.approx(80.0),
        ReviewMode.NEW: pytest.approx(100.0),
    }


def test_stats_ignore_sessions_in_progress(db: Session, stats_service: StatsService) -> None:
    """Test sessions without completion time are left out."""
    _session(db, ReviewMode.KNOWN, 10, 5)
    _session(db, ReviewMode.LEARNING, 10, 10, completed_at=None)

    stats = stats_service.get_training_stats()

    assert stats.total_sessions == 1
    assert stats.total_words_reviewed == 10
    assert stats.average_accuracy == pytest.approx(50.0)
    assert set(stats.accuracy_by_review_mode) == {ReviewMode.KNOWN}


def test_stats_zero_word_sessions(db: Session, stats_service: StatsService) -> None:
    """Test completed sessions without words give zero accuracy."""
    _session(db, ReviewMode.NEW, 0, 0)

    stats = stats_service.get_training_stats()

    assert stats.total_sessions == 1
    assert stats.average_accuracy == 0
    assert stats.accuracy_by_review_mode == {ReviewMode.NEW: 0.0}


def test_recent_sessions_latest_first(db: Session, stats_service: StatsService) -> None:
    """Test only the ten latest completed sessions are listed, newest first."""
    sessions = [
        _session(db, ReviewMode.MIXED, 10, index % 10, BASE_TIME + timedelta(days=index))
        for index in range(12)
    ]

    stats = stats_service.get_training_stats()
    recent_ids = [session.id for session in stats.recent_sessions]

    assert stats.total_sessions == 12
    assert recent_ids == [session.id for session in reversed(sessions)][:10]
    assert stats.recent_sessions[0].accuracy == pytest.approx(10.0)


def test_stats_to_dict(db: Session, stats_service: StatsService) -> None:
    """Test statistics serialize with mode names as keys."""
    _session(db, ReviewMode.MIXED, 4, 3)

    data = stats_service.get_training_stats().to_dict()

    assert data["total_sessions"] == 1
    assert data["accuracy_by_review_mode"] == {"MIXED": 75.0}
    assert data["recent_sessions"][0]["review_mode"] == "MIXED"
    assert data["recent_sessions"][0]["accuracy"] == 75.0

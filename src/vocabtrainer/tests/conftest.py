"""Test configuration."""
import os
import random
from pathlib import Path
from typing import Generator

import pytest
from dotenv import load_dotenv

# Set test environment before any imports
os.environ["ENV"] = "test"

# Load test environment variables
test_env_path = Path(__file__).resolve().parents[3] / ".env.test"
load_dotenv(test_env_path)
os.environ.setdefault("DATABASE_URL", "sqlite:///test_vocabtrainer.db")

# Import after environment setup
from faker import Faker  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from vocabtrainer.models.base import SessionLocal, drop_db, engine, init_db  # noqa: E402
from vocabtrainer.models.models import Word  # noqa: E402
from vocabtrainer.models.training_models import MasteryLevel  # noqa: E402
from vocabtrainer.services.training_service import TrainingService  # noqa: E402
from vocabtrainer.services.word_service import WordService  # noqa: E402

fake = Faker()


@pytest.fixture(autouse=True)
def setup_database():
    """Drop and recreate all tables before each test."""
    engine.dispose()
    drop_db()
    init_db()

    yield

    engine.dispose()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def word_service(db: Session) -> WordService:
    """Create a word service instance."""
    return WordService(db)


@pytest.fixture
def training_service(db: Session) -> TrainingService:
    """Create a training service with a seeded random generator."""
    return TrainingService(db, rng=random.Random(42))


@pytest.fixture
def make_words(db: Session):
    """Factory creating ``count`` words at the given mastery level."""

    def _make_words(count: int, level: MasteryLevel = MasteryLevel.NEW) -> list[Word]:
        words = [
            Word(text=fake.word(), translation=fake.word(), mastery_level=level)
            for _ in range(count)
        ]
        db.add_all(words)
        db.commit()
        for word in words:
            db.refresh(word)
        return words

    return _make_words

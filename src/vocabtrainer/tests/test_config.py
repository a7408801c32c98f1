"""Tests for configuration settings."""
import pytest

from vocabtrainer import config
from vocabtrainer.config import (
    DatabaseSettings,
    MonitoringSettings,
    Settings,
    TrainingSettings,
    settings,
)


def test_settings_defaults():
    """Test default training values."""
    assert settings.training.default_session_length == 15
    assert settings.training.max_session_length == 50
    assert settings.training.recent_sessions_limit == 10
    assert settings.training.max_prune_count == 100
    assert settings.training.learning_streak_threshold == 3
    assert settings.training.known_correct_threshold == 10
    assert settings.training.mastered_correct_threshold == 15


def test_database_url_from_test_env():
    """Test the test environment points at its own database."""
    assert config.env_file == ".env.test"
    assert settings.database.url.startswith("sqlite:///")
    assert "test" in settings.database.url


def test_validate_accepts_defaults():
    """Test the default settings are valid."""
    Settings().validate()


@pytest.mark.parametrize(
    "training",
    [
        TrainingSettings(default_session_length=0),
        TrainingSettings(default_session_length=60, max_session_length=50),
        TrainingSettings(max_session_length=0, default_session_length=1),
        TrainingSettings(recent_sessions_limit=0),
        TrainingSettings(max_prune_count=0),
        TrainingSettings(learning_streak_threshold=0),
        TrainingSettings(known_correct_threshold=20, mastered_correct_threshold=15),
    ],
)
def test_validate_rejects_bad_training_settings(training):
    """Test inconsistent training settings raise ValueError."""
    with pytest.raises(ValueError):
        Settings(training=training).validate()


def test_validate_rejects_bad_metrics_port():
    """Test an invalid metrics port raises ValueError."""
    with pytest.raises(ValueError):
        Settings(database=DatabaseSettings(), monitoring=MonitoringSettings(port=0)).validate()


if __name__ == "__main__":
    pytest.main([__file__])

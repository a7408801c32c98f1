"""Configuration settings for the training engine."""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Mastery ladder thresholds
LEARNING_STREAK_THRESHOLD = 3  # consecutive correct answers NEW -> LEARNING
KNOWN_CORRECT_THRESHOLD = 10  # total correct answers LEARNING -> KNOWN
MASTERED_CORRECT_THRESHOLD = 15  # total correct answers KNOWN -> MASTERED


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///vocabtrainer.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class TrainingSettings:
    """Training session settings."""
    default_session_length: int = int(os.getenv("DEFAULT_SESSION_LENGTH", "15"))
    max_session_length: int = int(os.getenv("MAX_SESSION_LENGTH", "50"))
    recent_sessions_limit: int = int(os.getenv("RECENT_SESSIONS_LIMIT", "10"))
    max_prune_count: int = int(os.getenv("MAX_PRUNE_COUNT", "100"))
    learning_streak_threshold: int = int(
        os.getenv("LEARNING_STREAK_THRESHOLD", str(LEARNING_STREAK_THRESHOLD))
    )
    known_correct_threshold: int = int(
        os.getenv("KNOWN_CORRECT_THRESHOLD", str(KNOWN_CORRECT_THRESHOLD))
    )
    mastered_correct_threshold: int = int(
        os.getenv("MASTERED_CORRECT_THRESHOLD", str(MASTERED_CORRECT_THRESHOLD))
    )


@dataclass
class MonitoringSettings:
    """Prometheus metrics settings."""
    enabled: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("METRICS_PORT", "9108"))


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_training_settings() -> TrainingSettings:
    """Get training settings."""
    return TrainingSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    training: TrainingSettings = field(default_factory=get_training_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        training = self.training

        if training.max_session_length < 1:
            raise ValueError("MAX_SESSION_LENGTH must be positive")

        if training.default_session_length < 1 or \
           training.default_session_length > training.max_session_length:
            raise ValueError("DEFAULT_SESSION_LENGTH must be between 1 and MAX_SESSION_LENGTH")

        if training.recent_sessions_limit < 1:
            raise ValueError("RECENT_SESSIONS_LIMIT must be positive")

        if training.max_prune_count < 1:
            raise ValueError("MAX_PRUNE_COUNT must be positive")

        if training.learning_streak_threshold < 1:
            raise ValueError("LEARNING_STREAK_THRESHOLD must be positive")

        if training.known_correct_threshold > training.mastered_correct_threshold:
            raise ValueError("KNOWN_CORRECT_THRESHOLD cannot be greater than MASTERED_CORRECT_THRESHOLD")

        if self.monitoring.port < 1 or self.monitoring.port > 65535:
            raise ValueError("METRICS_PORT must be a valid TCP port")


# Create global settings instance
settings = Settings()
settings.validate()

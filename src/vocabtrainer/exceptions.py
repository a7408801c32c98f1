"""Errors raised by the training engine."""
from typing import Any, Dict, Optional


class TrainingError(Exception):
    """Base class for all training engine errors."""

    code = "TRAINING_ERROR"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for callers."""
        data = {"code": self.code, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


class NotFoundError(TrainingError, LookupError):
    """A session or word identifier does not resolve."""

    code = "RESOURCE_NOT_FOUND"


class SessionNotFoundError(NotFoundError):
    def __init__(self, session_id: Any):
        super().__init__(f"Training session with ID '{session_id}' not found")
        self.session_id = session_id


class WordNotFoundError(NotFoundError):
    def __init__(self, word_id: Any):
        super().__init__(f"Word with ID '{word_id}' not found")
        self.word_id = word_id


class InvalidArgumentError(TrainingError, ValueError):
    """An argument is outside its accepted range."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field_name: Optional[str] = None, rejected_value: Any = None):
        super().__init__(message)
        self.field_name = field_name
        self.rejected_value = rejected_value

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.field_name:
            data["field"] = self.field_name
            data["rejected_value"] = self.rejected_value
        return data

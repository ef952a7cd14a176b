import uuid
from typing import Any

from app.core.exceptions import ValidationError


class ScoreValidator:
    """Validates leaderboard input before it reaches the score store."""

    def validate_identifier(self, value: Any, field: str) -> str:
        """Return the canonical UUID string for value or raise ValidationError."""
        try:
            return str(uuid.UUID(str(value)))
        except (ValueError, TypeError, AttributeError):
            raise ValidationError(f"{field} must be a valid UUID, got {value!r}")

    def validate_score(self, score: Any) -> int:
        """Scores are non-negative integers. Booleans and floats are rejected, not coerced."""
        if isinstance(score, bool) or not isinstance(score, int):
            raise ValidationError(f"Score must be an integer, got {score!r}")
        if score < 0:
            raise ValidationError(f"Score must be non-negative, got {score}")
        return score


score_validator = ScoreValidator()

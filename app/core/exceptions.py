class LeaderboardException(Exception):
    """Base exception for hackathon backend errors."""
    pass


class ValidationError(LeaderboardException):
    """Raised for malformed input such as a negative score or a bad identifier."""
    pass


class NotFoundError(LeaderboardException):
    """Raised when a referenced resource does not exist."""
    pass


class EventNotFound(NotFoundError):
    """Raised when an event is not found."""
    pass


class ProfileNotFound(NotFoundError):
    """Raised when a participant profile is not found."""
    pass


class PersistenceError(LeaderboardException):
    """Raised when the score store is unreachable or rejects a read/write."""
    pass

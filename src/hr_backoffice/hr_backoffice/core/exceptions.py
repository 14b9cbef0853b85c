class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidStatus(ValidationError):
    """Raised when an attendance status is outside Present/Absent/Halfday."""


class InvalidTimeFormat(ValidationError):
    """Raised when a time-of-day is not a valid HH:mm string."""


class InvalidSupervisor(ValidationError):
    """Raised when a supervisor link does not resolve to a supervisor."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action (or acts out of turn)."""


class NotFoundError(DomainError):
    """Raised when a referenced identity, record or request does not exist."""


class ConflictError(DomainError):
    """Raised when a write collides with the current state of a record."""


class AlreadyProcessed(ConflictError):
    """Raised when an approval stage has already been decided."""

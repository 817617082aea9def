class RSVPEngineError(Exception):
    """Base class for errors raised by the invite and RSVP engine."""


class ValidationError(RSVPEngineError):
    """Raised when caller input is missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NotFoundError(RSVPEngineError):
    """Raised when a referenced event, invite or response does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} not found: {identifier}")


class CapacityExceededError(RSVPEngineError):
    """Raised when a batch asks for more invites than the configured limit."""

    def __init__(self, requested: int, limit: int) -> None:
        self.requested = requested
        self.limit = limit
        super().__init__(f"Requested {requested} invites, the limit is {limit}")


class DependencyUnavailableError(RSVPEngineError):
    """Raised when persistence is down and no local fallback is allowed."""

    def __init__(self, dependency: str, reason: str = "") -> None:
        self.dependency = dependency
        self.reason = reason
        message = f"{dependency} is unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

"""Error taxonomy for game operations.

Every failure a service surfaces carries a machine readable ``code`` and a
user-safe ``message``. The HTTP layer maps each class to a status code.
"""


class GameError(Exception):
    code = "error"
    status = 400

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class NotFound(GameError):
    """A referenced id does not exist."""

    code = "not_found"
    status = 404


class Conflict(GameError):
    """The target is in a state that forbids the operation."""

    code = "conflict"
    status = 409


class LimitExceeded(GameError):
    """The request is above the caller's membership limits."""

    code = "limit_exceeded"
    status = 403


class InsufficientStock(GameError):
    code = "insufficient_stock"
    status = 409


class InvalidState(GameError):
    """Malformed mutation, e.g. creating an entry with a negative quantity."""

    code = "invalid_state"
    status = 400

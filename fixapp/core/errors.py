# File: fixapp/core/errors.py
"""Domain errors raised by the stores, the quiz engine and the solve client.

Routers never catch these; ``fixapp.main`` maps each one to an HTTP status.
"""


class FixAppError(Exception):
    """Base class for every recoverable domain failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FixAppError):
    """Bad or missing input to a store mutation."""


class NotFoundError(FixAppError):
    """Operation targets an id that does not exist."""

    def __init__(self, entity: str, key):
        super().__init__(f"{entity} {key} not found")
        self.entity = entity
        self.key = key


class LocationError(FixAppError):
    """The location provider denied or failed to deliver a fix."""


class SolveError(FixAppError):
    """The remote solve call failed.

    ``kind`` is one of ``transport``, ``no_data``, ``unparseable``,
    ``image_processing``, ``not_configured`` or ``busy``.
    """

    TRANSPORT = "transport"
    NO_DATA = "no_data"
    UNPARSEABLE = "unparseable"
    IMAGE_PROCESSING = "image_processing"
    NOT_CONFIGURED = "not_configured"
    BUSY = "busy"

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind

    @classmethod
    def transport(cls, message: str) -> "SolveError":
        return cls(cls.TRANSPORT, message)

    @classmethod
    def no_data(cls) -> "SolveError":
        return cls(cls.NO_DATA, "No data received from the server")

    @classmethod
    def unparseable(cls, message: str = "Unexpected response from the solve service") -> "SolveError":
        return cls(cls.UNPARSEABLE, message)

    @classmethod
    def image_processing(cls) -> "SolveError":
        return cls(cls.IMAGE_PROCESSING, "Failed to process the image")

    @classmethod
    def not_configured(cls) -> "SolveError":
        return cls(cls.NOT_CONFIGURED, "Solve service credentials are not configured")

    @classmethod
    def busy(cls) -> "SolveError":
        return cls(cls.BUSY, "A solve request is already in progress")


class ConflictError(FixAppError):
    """Operation is not allowed in the target's current state."""

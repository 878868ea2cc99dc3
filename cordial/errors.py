"""Exception hierarchy for request construction and entity synchronization."""

from __future__ import annotations


class CordialError(Exception):
    """Base class for every error raised by cordial."""


# ---------------------------------------------------------------------------
# Validation (always raised before a request is dispatched)
# ---------------------------------------------------------------------------

class ValidationError(CordialError):
    pass


class MissingSnowflakeError(ValidationError):
    pass


class MissingParamsError(ValidationError):
    pass


class UnsupportedTypeError(ValidationError):
    pass


class TooManyMessagesError(ValidationError):
    pass


class TooFewMessagesError(ValidationError):
    pass


# ---------------------------------------------------------------------------
# Encoding / transport / decoding
# ---------------------------------------------------------------------------

class EncodingError(CordialError):
    """An attachment could not be streamed into the multipart body."""


class TransportError(CordialError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class UnexpectedStatusError(TransportError):
    """The transport answered, but not with the status the operation requires."""


class DecodeError(CordialError):
    """A response body does not match the expected entity shape."""

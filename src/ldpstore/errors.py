from http import HTTPStatus
from typing import Optional


class StoreError(Exception):
    """Base class for all errors raised by a `Store` operation."""


class RequestError(StoreError):
    """Raised when the transport call itself fails, e.g. because the
    connection was refused or the local file does not exist."""
    def __init__(self, cause: BaseException, *args):
        super().__init__(*args)

        self.cause: BaseException = cause
        """The exception raised by the transport."""

    def __str__(self):
        return f'Request error: {self.cause}'


class StatusCodeError(StoreError):
    """Raised when the transport completes, but with an HTTP status code
    outside of the success range (200-299)."""
    def __init__(self, status_code: int, reason: Optional[str] = None, *args):
        super().__init__(*args)

        self.status_code: int = status_code
        """The numeric HTTP status code (e.g., 404) for the failed request."""

        if not reason:
            try:
                reason = HTTPStatus(status_code).phrase
            except ValueError:
                reason = ''
        self.reason: str = reason
        """The reason phrase (e.g., "Not Found") for the failed request. If
        the response did not have one, this is the standard status phrase
        from the built-in `HTTPStatus` enumeration, or the empty string for
        a nonstandard status code."""

    def __str__(self):
        return f'{self.status_code} {self.reason}'.rstrip()


class ParseError(StoreError):
    """Raised when the response body cannot be parsed into a graph."""
    def __init__(self, cause: BaseException, content_type: Optional[str] = None, *args):
        super().__init__(*args)
        self.cause: BaseException = cause
        self.content_type: Optional[str] = content_type

    def __str__(self):
        return f'Parser error ({self.content_type}): {self.cause}'


class SerializeError(StoreError):
    """Raised when a graph cannot be serialized for a request body."""
    def __init__(self, cause: BaseException, content_type: Optional[str] = None, *args):
        super().__init__(*args)
        self.cause: BaseException = cause
        self.content_type: Optional[str] = content_type

    def __str__(self):
        return f'Serializer error ({self.content_type}): {self.cause}'


class ConfigError(StoreError):
    def __init__(self, message):
        self.message = message

    def __str__(self):
        return self.message

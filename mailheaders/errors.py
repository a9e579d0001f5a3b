"""Errors raised by the header store."""
from typing import Optional


class MessagingError(Exception):
    """Base error; keeps the wrapped exception on `cause`."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class HeaderParseError(MessagingError):
    """Reading the header stream failed."""

"""
Error types raised by the book service and rendered by the API.
"""

from fastapi import status


MISSING_FIELDS_MESSAGE = "Send all required fields: title, author, publishYear"
BOOK_NOT_FOUND_MESSAGE = "Book not found"


class BookAPIError(Exception):
    """Base error carrying the message and HTTP status sent to the client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookAPIError):
    """A required book field was omitted."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = MISSING_FIELDS_MESSAGE):
        super().__init__(message)


class NotFoundError(BookAPIError):
    """The identifier does not resolve to a stored book."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = BOOK_NOT_FOUND_MESSAGE):
        super().__init__(message)


class InternalError(BookAPIError):
    """Unexpected failure from the persistence layer."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

"""
Book resource handler: validation, persistence calls and error mapping.
"""

from typing import Optional

import structlog

from api.database import BookRepository
from api.errors import InternalError, NotFoundError, ValidationError
from api.models import BookListResponse, BookPayload, BookResponse, MessageResponse

logger = structlog.get_logger(__name__)


class BookService:
    """
    Create, list, fetch, update and delete book records.

    The repository is passed in explicitly; any object exposing the
    BookRepository methods can stand in for it.
    """

    def __init__(self, repository: BookRepository):
        self.repository = repository

    async def create_book(self, payload: BookPayload) -> BookResponse:
        """Validate and insert a new book."""
        if not payload.has_required_fields():
            raise ValidationError()

        try:
            book = await self.repository.insert(payload.to_document())
        except Exception as e:
            logger.error("Failed to create book", error=str(e))
            raise InternalError(str(e)) from e

        logger.info("Book created", book_id=book.id, title=book.title)
        return book

    async def list_books(self) -> BookListResponse:
        """Return all books together with their count."""
        try:
            books = await self.repository.find_all()
        except Exception as e:
            logger.error("Failed to list books", error=str(e))
            raise InternalError(str(e)) from e

        return BookListResponse(count=len(books), data=books)

    async def get_book(self, book_id: str) -> Optional[BookResponse]:
        """
        Get a single book by ID.

        A missing book is returned as None rather than raised, unlike
        update and delete.
        """
        try:
            return await self.repository.find_by_id(book_id)
        except Exception as e:
            logger.error("Failed to get book", book_id=book_id, error=str(e))
            raise InternalError(str(e)) from e

    async def update_book(self, book_id: str, payload: BookPayload) -> MessageResponse:
        """Overwrite title, author and publishYear of an existing book."""
        if not payload.has_required_fields():
            raise ValidationError()

        try:
            result = await self.repository.find_by_id_and_update(book_id, payload.to_document())
        except Exception as e:
            logger.error("Failed to update book", book_id=book_id, error=str(e))
            raise InternalError(str(e)) from e

        if not result:
            raise NotFoundError()

        logger.info("Book updated", book_id=book_id)
        return MessageResponse(message="Book updated successfully")

    async def delete_book(self, book_id: str) -> MessageResponse:
        """Remove a book."""
        try:
            result = await self.repository.find_by_id_and_delete(book_id)
        except Exception as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise InternalError(str(e)) from e

        if not result:
            raise NotFoundError()

        logger.info("Book deleted", book_id=book_id)
        return MessageResponse(message="Book deleted successfully")

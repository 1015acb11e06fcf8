"""
MongoDB persistence layer for book records.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from api.models import BookResponse

logger = structlog.get_logger(__name__)


class BookRepository:
    """Async MongoDB repository for the books collection."""

    def __init__(self, database: AsyncIOMotorDatabase, collection_name: str = "books"):
        self.database = database
        self.books_collection = database[collection_name]

    @staticmethod
    def _to_response(book_doc: Dict[str, Any]) -> BookResponse:
        """Convert a raw MongoDB document into a BookResponse."""
        book_doc = dict(book_doc)
        book_doc["_id"] = str(book_doc["_id"])

        # Convert datetime fields to ISO format strings for JSON serialization
        for field in ("createdAt", "updatedAt"):
            if book_doc.get(field) and hasattr(book_doc[field], "isoformat"):
                book_doc[field] = book_doc[field].isoformat()

        return BookResponse(**book_doc)

    async def insert(self, record: Dict[str, Any]) -> BookResponse:
        """
        Insert a new book.

        Args:
            record: Book fields (title, author, publishYear)

        Returns:
            The stored book including its generated identifier
        """
        now = datetime.utcnow()
        book_doc = {**record, "createdAt": now, "updatedAt": now}

        result = await self.books_collection.insert_one(book_doc)
        book_doc["_id"] = result.inserted_id

        logger.debug("Book inserted", book_id=str(result.inserted_id))
        return self._to_response(book_doc)

    async def find_all(self) -> List[BookResponse]:
        """Return every stored book."""
        cursor = self.books_collection.find({})
        books_docs = await cursor.to_list(length=None)
        return [self._to_response(book_doc) for book_doc in books_docs]

    async def find_by_id(self, book_id: str) -> Optional[BookResponse]:
        """
        Get a single book by ID.

        Raises:
            bson.errors.InvalidId: If book_id is not a valid ObjectId
        """
        book_doc = await self.books_collection.find_one({"_id": ObjectId(book_id)})
        if book_doc:
            return self._to_response(book_doc)
        return None

    async def find_by_id_and_update(
        self,
        book_id: str,
        fields: Dict[str, Any]
    ) -> Optional[BookResponse]:
        """
        Overwrite the given fields of a book.

        Returns:
            The updated book, or None if no book has this ID
        """
        book_doc = await self.books_collection.find_one_and_update(
            {"_id": ObjectId(book_id)},
            {"$set": {**fields, "updatedAt": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER
        )
        if book_doc:
            return self._to_response(book_doc)
        return None

    async def find_by_id_and_delete(self, book_id: str) -> Optional[BookResponse]:
        """
        Remove a book.

        Returns:
            The deleted book, or None if no book has this ID
        """
        book_doc = await self.books_collection.find_one_and_delete({"_id": ObjectId(book_id)})
        if book_doc:
            return self._to_response(book_doc)
        return None

    async def health_check(self) -> Dict:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.database.command("ping")
            books_count = await self.books_collection.count_documents({})

            return {
                "status": "healthy",
                "books_collection": "accessible",
                "books_count": books_count
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }

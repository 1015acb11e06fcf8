"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from api.database import BookRepository
from api.main import app, get_book_repository
from api.models import BookResponse


class InMemoryBookRepository:
    """
    Dictionary backed stand-in for BookRepository.

    Identifiers are real ObjectId strings and malformed identifiers raise
    bson.errors.InvalidId, as they do against MongoDB.
    """

    def __init__(self):
        self.books: Dict[ObjectId, Dict[str, Any]] = {}

    async def insert(self, record: Dict[str, Any]) -> BookResponse:
        now = datetime.utcnow()
        book_id = ObjectId()
        self.books[book_id] = {**record, "_id": book_id, "createdAt": now, "updatedAt": now}
        return BookRepository._to_response(self.books[book_id])

    async def find_all(self) -> List[BookResponse]:
        return [BookRepository._to_response(doc) for doc in self.books.values()]

    async def find_by_id(self, book_id: str) -> Optional[BookResponse]:
        book_doc = self.books.get(ObjectId(book_id))
        return BookRepository._to_response(book_doc) if book_doc else None

    async def find_by_id_and_update(self, book_id: str, fields: Dict[str, Any]) -> Optional[BookResponse]:
        book_doc = self.books.get(ObjectId(book_id))
        if not book_doc:
            return None
        book_doc.update(fields, updatedAt=datetime.utcnow())
        return BookRepository._to_response(book_doc)

    async def find_by_id_and_delete(self, book_id: str) -> Optional[BookResponse]:
        book_doc = self.books.pop(ObjectId(book_id), None)
        return BookRepository._to_response(book_doc) if book_doc else None

    async def health_check(self) -> Dict:
        return {"status": "healthy", "books_count": len(self.books)}


@pytest.fixture
def book_repository():
    """Create an empty in-memory repository."""
    return InMemoryBookRepository()


@pytest.fixture
def client(book_repository):
    """Create test client wired to the in-memory repository."""
    app.dependency_overrides[get_book_repository] = lambda: book_repository
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_book():
    """Sample book request body."""
    return {"title": "Dune", "author": "Herbert", "publishYear": 1965}

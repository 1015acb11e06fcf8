"""
Tests for the MongoDB book repository with a mocked Motor collection.
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from api.database import BookRepository

BOOK_ID = ObjectId("5f8d0d55b54764421b7156c9")


@pytest.fixture
def book_doc():
    """Raw document as returned by MongoDB."""
    timestamp = datetime(2025, 9, 21, 10, 0, 0)
    return {
        "_id": BOOK_ID,
        "title": "Dune",
        "author": "Herbert",
        "publishYear": 1965,
        "createdAt": timestamp,
        "updatedAt": timestamp,
    }


@pytest.fixture
def mock_collection():
    """Create a mock books collection."""
    return AsyncMock()


@pytest.fixture
def repository(mock_collection):
    database = MagicMock()
    database.__getitem__.return_value = mock_collection
    database.command = AsyncMock()
    return BookRepository(database, "books")


def test_to_response_serializes_id_and_timestamps(book_doc):
    book = BookRepository._to_response(book_doc)
    assert book.id == "5f8d0d55b54764421b7156c9"
    assert book.created_at == "2025-09-21T10:00:00"
    assert book_doc["_id"] == BOOK_ID


@pytest.mark.asyncio
async def test_insert(repository, mock_collection):
    mock_collection.insert_one.return_value = MagicMock(inserted_id=BOOK_ID)

    book = await repository.insert({"title": "Dune", "author": "Herbert", "publishYear": 1965})

    assert book.id == str(BOOK_ID)
    assert book.publish_year == 1965
    stored = mock_collection.insert_one.await_args.args[0]
    assert isinstance(stored["createdAt"], datetime)
    assert stored["createdAt"] == stored["updatedAt"]


@pytest.mark.asyncio
async def test_find_all(repository, mock_collection, book_doc):
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[book_doc])
    mock_collection.find = MagicMock(return_value=cursor)

    books = await repository.find_all()

    assert [b.title for b in books] == ["Dune"]
    mock_collection.find.assert_called_once_with({})


@pytest.mark.asyncio
async def test_find_by_id(repository, mock_collection, book_doc):
    mock_collection.find_one.return_value = book_doc

    book = await repository.find_by_id(str(BOOK_ID))

    assert book.author == "Herbert"
    mock_collection.find_one.assert_awaited_once_with({"_id": BOOK_ID})


@pytest.mark.asyncio
async def test_find_by_id_missing(repository, mock_collection):
    mock_collection.find_one.return_value = None

    assert await repository.find_by_id(str(BOOK_ID)) is None


@pytest.mark.asyncio
async def test_find_by_id_invalid(repository, mock_collection):
    with pytest.raises(InvalidId):
        await repository.find_by_id("abc")

    mock_collection.find_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_find_by_id_and_update(repository, mock_collection, book_doc):
    mock_collection.find_one_and_update.return_value = book_doc
    fields = {"title": "Dune", "author": "Herbert", "publishYear": 1965}

    book = await repository.find_by_id_and_update(str(BOOK_ID), fields)

    assert book.title == "Dune"
    args, kwargs = mock_collection.find_one_and_update.await_args
    assert args[0] == {"_id": BOOK_ID}
    assert args[1]["$set"]["title"] == "Dune"
    assert "updatedAt" in args[1]["$set"]
    assert kwargs["return_document"] == ReturnDocument.AFTER


@pytest.mark.asyncio
async def test_find_by_id_and_delete_missing(repository, mock_collection):
    mock_collection.find_one_and_delete.return_value = None

    assert await repository.find_by_id_and_delete(str(BOOK_ID)) is None


@pytest.mark.asyncio
async def test_health_check(repository, mock_collection):
    mock_collection.count_documents.return_value = 3

    health = await repository.health_check()

    assert health["status"] == "healthy"
    assert health["books_count"] == 3


@pytest.mark.asyncio
async def test_health_check_unhealthy(repository):
    repository.database.command.side_effect = RuntimeError("no servers")

    health = await repository.health_check()

    assert health == {"status": "unhealthy", "error": "no servers"}

"""
FastAPI main application for the Book Records API.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import APIConfig, config
from api.database import BookRepository
from api.errors import BookAPIError, InternalError
from api.models import (
    BookListResponse, BookPayload, BookResponse,
    ErrorResponse, HealthResponse, MessageResponse
)
from api.service import BookService

# Setup logging
logger = structlog.get_logger(__name__)


def get_book_repository(request: Request) -> BookRepository:
    """Return the repository created during application startup."""
    repository = getattr(request.app.state, "book_repository", None)
    if repository is None:
        raise InternalError("Database service not available")
    return repository


def get_book_service(repository: BookRepository = Depends(get_book_repository)) -> BookService:
    """Build the book service around the injected repository."""
    return BookService(repository)


router = APIRouter(prefix="/books", tags=["Books"])

error_responses = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.post(
    "/",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False
)
@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}, **error_responses}
)
async def create_book(
    payload: Optional[BookPayload] = None,
    service: BookService = Depends(get_book_service)
):
    """
    Create a new book.

    - **title**: Book title (required)
    - **author**: Book author (required)
    - **publishYear**: Year of publication (required)
    """
    return await service.create_book(payload or BookPayload())


@router.get("/", response_model=BookListResponse, include_in_schema=False)
@router.get("", response_model=BookListResponse, responses=error_responses)
async def list_books(service: BookService = Depends(get_book_service)):
    """Get all books with their count."""
    return await service.list_books()


@router.get("/{book_id}", response_model=Optional[BookResponse], responses=error_responses)
async def get_book(book_id: str, service: BookService = Depends(get_book_service)):
    """
    Get a single book by ID.

    Responds with `null` when no book has this ID.
    """
    return await service.get_book(book_id)


@router.put(
    "/{book_id}",
    response_model=MessageResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        **error_responses
    }
)
async def update_book(
    book_id: str,
    payload: Optional[BookPayload] = None,
    service: BookService = Depends(get_book_service)
):
    """Update a book by ID. All of title, author and publishYear are required."""
    return await service.update_book(book_id, payload or BookPayload())


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}, **error_responses}
)
async def delete_book(book_id: str, service: BookService = Depends(get_book_service)):
    """Delete a book by ID."""
    return await service.delete_book(book_id)


async def book_api_error_handler(request: Request, exc: BookAPIError):
    """Render service errors as {"message": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message).model_dump()
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None)
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as bad requests."""
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    logger.warning("Request validation failed", path=request.url.path, error=message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(message=message).model_dump()
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(message=str(exc)).model_dump()
    )


def create_app(settings: APIConfig = config) -> FastAPI:
    """Create the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        # Startup
        logger.info("Starting Book Records API")

        client = AsyncIOMotorClient(settings.mongodb_url)
        try:
            database = client[settings.mongodb_database]

            # Test connection
            await database.command("ping")
            logger.info("Database connection established", database=settings.mongodb_database)

            app.state.book_repository = BookRepository(database, settings.mongodb_collection)

        except Exception as e:
            logger.error("Failed to connect to database", error=str(e))
            client.close()
            raise

        yield

        # Shutdown
        logger.info("Shutting down Book Records API")
        app.state.book_repository = None
        client.close()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        license_info={
            "name": "MIT",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(BookAPIError, book_api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        repository = getattr(request.app.state, "book_repository", None)
        db_status = "unavailable"
        if repository is not None:
            health_info = await repository.health_check()
            db_status = health_info.get("status", "unknown")

        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.utcnow(),
            version=settings.api_version,
            database_status=db_status
        )

    app.include_router(router)
    return app


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower()
    )

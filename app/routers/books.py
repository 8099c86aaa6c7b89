"""
Books Router

CRUD endpoints for the book catalog.

Endpoints:
- GET /books - List every book
- GET /books/{book_id} - Get a book
- POST /books - Create a book (authenticated)
- PUT /books/{book_id} - Replace a book's fields (authenticated)
- DELETE /books/{book_id} - Delete a book and its reviews (authenticated)

Reads are public; writes carry the tighter write rate limit.
"""

from fastapi import APIRouter, Request, status

from app.config import get_settings
from app.dependencies import ActiveUser, Database
from app.schemas import BookCreate, BookResponse, BookUpdate, Envelope, success_response
from app.services import books as book_service
from app.services.rate_limiter import limiter

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================
router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


@router.get(
    "",
    response_model=Envelope[list[BookResponse]],
    summary="List books",
    description="Get every book in the catalog. No filtering or pagination.",
)
async def list_books(db: Database) -> dict:
    books = await book_service.list_books(db)
    return success_response(
        "Books fetched successfully",
        [BookResponse.from_model(book) for book in books],
    )


@router.get(
    "/{book_id}",
    response_model=Envelope[BookResponse],
    summary="Get a book by ID",
)
async def get_book(book_id: str, db: Database) -> dict:
    book = await book_service.get_book(db, book_id)
    return success_response("Book fetched successfully", BookResponse.from_model(book))


@router.post(
    "",
    response_model=Envelope[BookResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description="""
    Add a book to the catalog. Titles must be unique.

    When `image` is omitted or blank the default cover is used.
    """,
    responses={409: {"description": "A book with this title already exists"}},
)
@limiter.limit(settings.rate_limit_write)
async def create_book(
    request: Request,
    book_data: BookCreate,
    db: Database,
    current_user: ActiveUser,
) -> dict:
    book = await book_service.create_book(db, book_data)
    return success_response("Book created successfully", BookResponse.from_model(book))


@router.put(
    "/{book_id}",
    response_model=Envelope[BookResponse],
    summary="Update a book",
    description="Replace every field of a book with the values given.",
)
@limiter.limit(settings.rate_limit_write)
async def update_book(
    request: Request,
    book_id: str,
    book_data: BookUpdate,
    db: Database,
    current_user: ActiveUser,
) -> dict:
    book = await book_service.update_book(db, book_id, book_data)
    return success_response("Book updated successfully", BookResponse.from_model(book))


@router.delete(
    "/{book_id}",
    response_model=Envelope[BookResponse],
    summary="Delete a book",
    description="Delete a book and every review of it. Returns the deleted book.",
)
@limiter.limit(settings.rate_limit_write)
async def delete_book(
    request: Request,
    book_id: str,
    db: Database,
    current_user: ActiveUser,
) -> dict:
    book = await book_service.delete_book(db, book_id)
    return success_response("Book deleted successfully", BookResponse.from_model(book))

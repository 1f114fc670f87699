"""Book API router with CRUD operations and catalogue queries."""

from fastapi import APIRouter, Depends, status

from src.library.api.http.deps import get_book_service
from src.library.core.services import BookService
from src.library.entities.service.book import Book, BorrowedBookSummary

router = APIRouter(tags=["books"])


@router.post("/book", response_model=Book, status_code=status.HTTP_201_CREATED)
def create_book(
    book: Book,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Register a new book."""
    return service.create(book)


@router.get("/books", response_model=list[Book])
def list_books(
    service: BookService = Depends(get_book_service),
) -> list[Book]:
    """List all books."""
    return service.get_all()


@router.get("/books/available", response_model=list[Book])
def list_available_books(
    service: BookService = Depends(get_book_service),
) -> list[Book]:
    """List books with at least one unit on the shelf."""
    return service.get_available()


@router.get("/books/count")
def count_books(
    service: BookService = Depends(get_book_service),
) -> dict[str, int]:
    """Count registered books."""
    return {"count": service.count()}


@router.get("/books/most-borrowed", response_model=list[BorrowedBookSummary])
def most_borrowed_books(
    service: BookService = Depends(get_book_service),
) -> list[BorrowedBookSummary]:
    """Top books by number of loans."""
    return service.most_borrowed()


@router.get("/book/title/{title}", response_model=Book)
def get_book_by_title(
    title: str,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Get a book by its title."""
    return service.get_by_title(title)


@router.get("/book/code/{code}", response_model=Book)
def get_book_by_code(
    code: str,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Get a book by its classification code."""
    return service.get_by_code(code)


@router.get("/book/{book_id}", response_model=Book)
def get_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Get a book by ID."""
    return service.get(book_id)


@router.put("/book/{book_id}", response_model=Book)
def update_book(
    book_id: str,
    book: Book,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Update a book."""
    return service.update(book_id, book)


@router.delete("/book/{book_id}")
def delete_book(
    book_id: str,
    service: BookService = Depends(get_book_service),
) -> dict[str, str]:
    """Delete a book."""
    return {"message": service.delete(book_id)}

"""Reader API router with CRUD operations."""

from fastapi import APIRouter, Depends, status

from src.library.api.http.deps import get_reader_service
from src.library.core.services import ReaderService
from src.library.entities.service.reader import Reader

router = APIRouter(tags=["readers"])


@router.post("/reader", response_model=Reader, status_code=status.HTTP_201_CREATED)
def create_reader(
    reader: Reader,
    service: ReaderService = Depends(get_reader_service),
) -> Reader:
    """Register a new reader."""
    return service.create(reader)


@router.get("/readers", response_model=list[Reader])
def list_readers(
    service: ReaderService = Depends(get_reader_service),
) -> list[Reader]:
    """List all readers."""
    return service.get_all()


@router.get("/reader/{reader_id}", response_model=Reader)
def get_reader(
    reader_id: str,
    service: ReaderService = Depends(get_reader_service),
) -> Reader:
    """Get a reader by ID."""
    return service.get(reader_id)


@router.put("/reader/{reader_id}", response_model=Reader)
def update_reader(
    reader_id: str,
    reader: Reader,
    service: ReaderService = Depends(get_reader_service),
) -> Reader:
    """Update a reader."""
    return service.update(reader_id, reader)


@router.delete("/reader/{reader_id}")
def delete_reader(
    reader_id: str,
    service: ReaderService = Depends(get_reader_service),
) -> dict[str, str]:
    """Delete a reader."""
    return {"message": service.delete(reader_id)}

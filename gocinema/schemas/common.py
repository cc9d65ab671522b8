from typing import Optional, List, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


# Paginated response wrapper, used by admin list endpoints
class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


# Tagged result: every failed call answers with this shape
class ErrorResponse(BaseModel):
    success: bool = False
    error: str


# Base for action results (booking, payment, scanner, ...)
class ActionResult(BaseModel):
    success: bool = True
    message: Optional[str] = None


class DeleteResponse(BaseModel):
    id: str
    deleted: bool = True

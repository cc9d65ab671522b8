from typing import Optional, List
from pydantic import BaseModel, UUID4

from gocinema.models.seat import SeatType


class HallCreate(BaseModel):
    name: str


class Hall(BaseModel):
    id: UUID4
    name: str
    capacity: int

    class Config:
        from_attributes = True


# Compact hall for nested responses (screening, ticket)
class HallSummary(BaseModel):
    id: UUID4
    name: str
    capacity: int

    class Config:
        from_attributes = True


# Seat: base fields
class SeatBase(BaseModel):
    row: str
    number: int
    seat_type: SeatType = SeatType.standard


class SeatCreate(SeatBase):
    pass


class SeatUpdate(BaseModel):
    row: Optional[str] = None
    number: Optional[int] = None
    seat_type: Optional[SeatType] = None


class Seat(SeatBase):
    id: UUID4
    hall_id: UUID4

    class Config:
        from_attributes = True


# Bulk seat creation (POST /admin/seats/bulk)
class SeatBulkCreate(BaseModel):
    rows: List[str]
    seats_per_row: int
    seat_type: SeatType = SeatType.standard


class SeatBulkCreateResponse(BaseModel):
    success: bool = True
    created_count: int
    hall_id: UUID4
    message: Optional[str] = None


# --- Seat map (screening detail) ---

class SeatMapSeat(SeatBase):
    id: UUID4
    is_taken: bool = False

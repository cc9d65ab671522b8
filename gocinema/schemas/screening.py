from typing import Optional, List
from pydantic import BaseModel, UUID4, field_validator
from decimal import Decimal
from datetime import datetime

from gocinema.schemas.hall import HallSummary, SeatMapSeat
from gocinema.schemas.movie import MovieSummary
from gocinema.utils.dates import ensure_utc


# Screening: Create (POST /admin/screenings)
class ScreeningCreate(BaseModel):
    movie_id: UUID4
    hall_id: UUID4
    start_time: datetime
    end_time: datetime
    base_price: Optional[Decimal] = None  # falls back to DEFAULT_BASE_PRICE

    @field_validator("start_time", "end_time")
    @classmethod
    def to_utc(cls, v):
        return ensure_utc(v)


class ScreeningUpdate(BaseModel):
    movie_id: Optional[UUID4] = None
    hall_id: Optional[UUID4] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    base_price: Optional[Decimal] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def to_utc(cls, v):
        return ensure_utc(v)


class Screening(BaseModel):
    id: UUID4
    movie_id: UUID4
    hall_id: UUID4
    start_time: datetime
    end_time: datetime
    base_price: Decimal
    movie: Optional[MovieSummary] = None
    hall: Optional[HallSummary] = None
    tickets_sold: int = 0

    class Config:
        from_attributes = True


# GET /screenings/{id} includes the seat map
class ScreeningDetail(Screening):
    seats: List[SeatMapSeat] = []


# Compact screening for nested responses (ticket)
class ScreeningSummary(BaseModel):
    id: UUID4
    start_time: datetime
    end_time: datetime
    movie: Optional[MovieSummary] = None
    hall: Optional[HallSummary] = None

    class Config:
        from_attributes = True

from typing import Annotated, Optional, List
from pydantic import BaseModel, Field, UUID4
from decimal import Decimal
from datetime import datetime

from gocinema.models.ticket import TicketStatus
from gocinema.schemas.hall import Seat
from gocinema.schemas.screening import ScreeningSummary
from gocinema.schemas.user import UserSummary


# Ticket: Reserve (POST /tickets)
class TicketCreate(BaseModel):
    screening_id: UUID4
    seat_ids: Annotated[List[UUID4], Field(min_length=1)]


class Ticket(BaseModel):
    id: UUID4
    screening_id: UUID4
    seat_id: UUID4
    user_id: UUID4
    order_id: Optional[UUID4] = None
    price: Decimal
    status: TicketStatus
    qr_code: Optional[str] = None
    created_at: Optional[datetime] = None
    seat: Optional[Seat] = None
    screening: Optional[ScreeningSummary] = None

    class Config:
        from_attributes = True


# Admin list row
class TicketWithUser(Ticket):
    user: Optional[UserSummary] = None


class TicketStatusUpdate(BaseModel):
    status: TicketStatus


class ReservationResult(BaseModel):
    success: bool = True
    tickets: List[Ticket]

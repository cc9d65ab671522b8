from typing import Literal, Optional, List
from pydantic import BaseModel

from gocinema.schemas.order import Order
from gocinema.schemas.ticket import TicketWithUser


class ScanRequest(BaseModel):
    code: str


class ScanResult(BaseModel):
    success: bool = True
    type: Literal["order", "ticket"]
    order: Optional[Order] = None
    ticket: Optional[TicketWithUser] = None


class MarkUsedResult(BaseModel):
    success: bool = True
    tickets: List[TicketWithUser]

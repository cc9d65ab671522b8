from typing import List, Optional
from pydantic import BaseModel, UUID4
from decimal import Decimal
from datetime import datetime

from gocinema.models.payment import PaymentMethod


class PaymentCreate(BaseModel):
    method: PaymentMethod = PaymentMethod.card


class Payment(BaseModel):
    id: UUID4
    ticket_id: UUID4
    amount: Decimal
    method: PaymentMethod
    status: str
    transaction_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentResult(BaseModel):
    success: bool = True
    payments: List[Payment]
    qr_codes: List[str]
    order_qr_code: Optional[str] = None
    amount: Decimal

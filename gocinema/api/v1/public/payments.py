from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gocinema.db.session import get_db
from gocinema.api.deps import get_current_user
from gocinema.models.payment import Payment
from gocinema.models.user import User
from gocinema.schemas.payment import Payment as PaymentSchema, PaymentCreate, PaymentResult
from gocinema.services import payments as payment_service

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/tickets/{ticket_id}", response_model=PaymentResult)
def pay_ticket(
    ticket_id: UUID,
    data: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return payment_service.pay_ticket(db, current_user, ticket_id, data.method)


@router.post("/orders/{order_id}", response_model=PaymentResult)
def pay_order(
    order_id: UUID,
    data: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Pay every reserved ticket of the order at once."""
    return payment_service.pay_order(db, current_user, order_id, data.method)


@router.get("/", response_model=List[PaymentSchema])
def my_payments(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return (
        db.query(Payment)
        .filter(Payment.user_id == current_user.id)
        .order_by(Payment.created_at.desc())
        .all()
    )
